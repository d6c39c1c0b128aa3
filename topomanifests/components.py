"""Component names, their validation and the paths of their bundled manifests."""

from __future__ import annotations

import base64
from typing import Any

COMPONENT_API = "api"
COMPONENT_SCHEDULER_PLUGIN = "sched"
COMPONENT_RESOURCE_TOPOLOGY_EXPORTER = "rte"
COMPONENT_NODE_FEATURE_DISCOVERY = "nfd"

SUB_COMPONENT_SCHEDULER_PLUGIN_SCHEDULER = "scheduler"
SUB_COMPONENT_SCHEDULER_PLUGIN_CONTROLLER = "controller"
SUB_COMPONENT_NODE_FEATURE_DISCOVERY_TOPOLOGY_UPDATER = "topologyupdater"

ROLE_NAME_AUTH_READER = "authreader"
ROLE_NAME_LEADER_ELECT = "leaderelect"

CONTAINER_NAME_RTE = "resource-topology-exporter"
CONTAINER_NAME_NFD_TOPOLOGY_UPDATER = "nfd-topology-updater"

DEFAULT_UPDATER_SYNC_PERIOD_SECONDS = 10
DEFAULT_UPDATER_VERBOSE = 1

DEFAULT_IGNITION_VERSION = "3.2.0"
DEFAULT_IGNITION_CONTENT_SOURCE = "data:text/plain;charset=utf-8;base64"
DEFAULT_OCI_HOOKS_DIR = "/etc/containers/oci/hooks.d"
DEFAULT_SCRIPTS_DIR = "/usr/local/bin"

MANIFESTS_ROOT = "yaml"

_COMPONENTS = frozenset(
    {
        COMPONENT_API,
        COMPONENT_RESOURCE_TOPOLOGY_EXPORTER,
        COMPONENT_NODE_FEATURE_DISCOVERY,
        COMPONENT_SCHEDULER_PLUGIN,
    }
)

_SUB_COMPONENTS = {
    COMPONENT_SCHEDULER_PLUGIN: frozenset(
        {SUB_COMPONENT_SCHEDULER_PLUGIN_CONTROLLER, SUB_COMPONENT_SCHEDULER_PLUGIN_SCHEDULER}
    ),
    COMPONENT_NODE_FEATURE_DISCOVERY: frozenset(
        {SUB_COMPONENT_NODE_FEATURE_DISCOVERY_TOPOLOGY_UPDATER}
    ),
}

_ROLE_NAMES = frozenset({ROLE_NAME_AUTH_READER, ROLE_NAME_LEADER_ELECT})


class ManifestError(ValueError):
    """Raised when a manifest is requested for an unknown component or role."""


def validate_component(component: str) -> None:
    if component not in _COMPONENTS:
        raise ManifestError(f"unknown component: {component!r}")


def validate_sub_component(component: str, sub_component: str) -> None:
    if not sub_component:
        return
    if sub_component in _SUB_COMPONENTS.get(component, frozenset()):
        return
    raise ManifestError(
        f"unknown subComponent {sub_component!r} for component: {component!r}"
    )


def validate_role_name(role_name: str) -> None:
    if role_name not in _ROLE_NAMES:
        raise ManifestError(f"unknown roleName {role_name!r}")


def role_binding_file_name(role_name: str) -> str:
    """Return the manifest file name of the role binding for ``role_name``."""
    if not role_name:
        return "rolebinding.yaml"
    validate_role_name(role_name)
    return f"rolebinding_{role_name}.yaml"


def manifest_path(component: str, sub_component: str, file_name: str) -> str:
    """Return the path of a bundled manifest after validating the component names."""
    validate_component(component)
    validate_sub_component(component, sub_component)
    parts = (MANIFESTS_ROOT, component, sub_component, file_name)
    return "/".join(part for part in parts if part)


def ignition_file(content: bytes | str, mode: int, destination: str) -> dict[str, Any]:
    """Build an ignition storage file entry embedding ``content`` as a data URL."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    encoded = base64.b64encode(content).decode("ascii")
    return {
        "path": destination,
        "contents": {"source": f"{DEFAULT_IGNITION_CONTENT_SOURCE},{encoded}"},
        "mode": mode,
    }