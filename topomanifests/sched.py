"""Settings of the topology-aware scheduler plugin deployment."""

from __future__ import annotations

from topomanifests.schedparams import (
    LEADER_ELECTION_DEFAULT_NAME,
    LEADER_ELECTION_DEFAULT_NAMESPACE,
    LeaderElectionParams,
    SchedParamsError,
)

DEFAULT_PROFILE_NAME = "topology-aware-scheduler"
DEFAULT_RESYNC_PERIOD_SECONDS = 5
DEFAULT_VERBOSE = 4
DEFAULT_CTRL_PLANE_AFFINITY = True
DEFAULT_LEADER_ELECT_RESOURCE = (
    f"{LEADER_ELECTION_DEFAULT_NAMESPACE}/{LEADER_ELECTION_DEFAULT_NAME}"
)

NAMESPACE_OPENSHIFT = "openshift-topology-aware-scheduler"


def leader_election_params_from_opts(
    leader_election: bool, leader_election_resource: str
) -> tuple[LeaderElectionParams, bool]:
    """Build leader election parameters from the scheduler options.

    Returns the parameters and whether leader election is enabled. The
    resource is either ``name`` or ``namespace/name``; empty parts keep the
    defaults. Raises ``SchedParamsError`` if the resource has more parts.
    """
    params = LeaderElectionParams()
    if not leader_election:
        return params, False

    params.set_defaults()
    params.leader_elect = True

    tokens = (leader_election_resource or "").split("/")
    if len(tokens) == 1:
        (name,) = tokens
        if name:
            params.resource_name = name
    elif len(tokens) == 2:
        namespace, name = tokens
        if namespace:
            params.resource_namespace = namespace
        if name:
            params.resource_name = name
    else:
        raise SchedParamsError(
            f"malformed leader election resource: {leader_election_resource!r}"
        )
    return params, True