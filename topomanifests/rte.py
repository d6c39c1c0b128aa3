"""Objects of the resource topology exporter deployment."""

from __future__ import annotations

from typing import Any

CONFIG_DATA_FIELD = "config.yaml"


def create_config_map(namespace: str, name: str, config_data: str) -> dict[str, Any]:
    """Build the ConfigMap carrying the exporter configuration.

    The configuration text is stored under the ``config.yaml`` key. Empty
    names and namespaces are left out of the metadata, as they would be
    when serialized.
    """
    metadata: dict[str, Any] = {}
    if name:
        metadata["name"] = name
    if namespace:
        metadata["namespace"] = namespace
    return {
        "kind": "ConfigMap",
        "apiVersion": "v1",
        "metadata": metadata,
        "data": {CONFIG_DATA_FIELD: config_data},
    }