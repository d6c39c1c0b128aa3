"""Scheduler plugin parameters and their decoding from scheduler configurations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

log = logging.getLogger(__name__)

SCHEDULER_CONFIG_FILE_NAME = "scheduler-config.yaml"
SCHEDULER_PLUGIN_NAME = "NodeResourceTopologyMatch"

FOREIGN_PODS_DETECT_NONE = "None"
FOREIGN_PODS_DETECT_ALL = "All"
FOREIGN_PODS_DETECT_ONLY_EXCLUSIVE_RESOURCES = "OnlyExclusiveResources"

CACHE_RESYNC_AUTODETECT = "Autodetect"
CACHE_RESYNC_ALL = "All"
CACHE_RESYNC_ONLY_EXCLUSIVE_RESOURCES = "OnlyExclusiveResources"

CACHE_INFORMER_SHARED = "Shared"
CACHE_INFORMER_DEDICATED = "Dedicated"

SCORING_STRATEGY_MOST_ALLOCATED = "MostAllocated"
SCORING_STRATEGY_BALANCED_ALLOCATION = "BalancedAllocation"
SCORING_STRATEGY_LEAST_ALLOCATED = "LeastAllocated"

LEADER_ELECTION_DEFAULT_NAME = "nrtmatch-scheduler"
LEADER_ELECTION_DEFAULT_NAMESPACE = "tas-scheduler"

# Five seconds expressed in nanoseconds, as the defaults have always stored it.
DEFAULT_RESYNC_PERIOD_SECONDS = 5 * 1_000_000_000

_FOREIGN_PODS_DETECT_MODES = frozenset(
    {FOREIGN_PODS_DETECT_NONE, FOREIGN_PODS_DETECT_ALL, FOREIGN_PODS_DETECT_ONLY_EXCLUSIVE_RESOURCES}
)
_CACHE_RESYNC_METHODS = frozenset(
    {CACHE_RESYNC_AUTODETECT, CACHE_RESYNC_ALL, CACHE_RESYNC_ONLY_EXCLUSIVE_RESOURCES}
)
_CACHE_INFORMER_MODES = frozenset({CACHE_INFORMER_SHARED, CACHE_INFORMER_DEDICATED})
_SCORING_STRATEGY_TYPES = frozenset(
    {
        SCORING_STRATEGY_MOST_ALLOCATED,
        SCORING_STRATEGY_BALANCED_ALLOCATION,
        SCORING_STRATEGY_LEAST_ALLOCATED,
    }
)


class SchedParamsError(ValueError):
    """Raised when scheduler parameters are malformed or unsupported."""


def validate_foreign_pods_detect_mode(value: str) -> None:
    if value not in _FOREIGN_PODS_DETECT_MODES:
        raise SchedParamsError(f"unsupported foreignPodsDetectMode: {value}")


def validate_cache_resync_method(value: str) -> None:
    if value not in _CACHE_RESYNC_METHODS:
        raise SchedParamsError(f"unsupported cacheResyncMethod: {value}")


def validate_cache_informer_mode(value: str) -> None:
    if value not in _CACHE_INFORMER_MODES:
        raise SchedParamsError(f"unsupported cacheInformerMode: {value}")


def validate_scoring_strategy_type(value: str) -> None:
    if value not in _SCORING_STRATEGY_TYPES:
        raise SchedParamsError(f"unsupported scoringStrategyType: {value}")


def _optional_str(mapping: Mapping[str, Any], key: str, current: str | None) -> str | None:
    if key not in mapping:
        return current
    value = mapping[key]
    if value is not None and not isinstance(value, str):
        raise SchedParamsError(f"field {key} must be a string, got {value!r}")
    return value


@dataclass
class ConfigCacheParams:
    """Cache settings of the topology-aware scheduler plugin."""

    resync_period_seconds: int | None = None
    resync_method: str | None = None
    foreign_pods_detect_mode: str | None = None
    informer_mode: str | None = None

    def set_defaults(self) -> None:
        self.resync_period_seconds = DEFAULT_RESYNC_PERIOD_SECONDS
        self.resync_method = CACHE_RESYNC_AUTODETECT
        self.foreign_pods_detect_mode = FOREIGN_PODS_DETECT_ONLY_EXCLUSIVE_RESOURCES
        # informer mode is intentionally left unspecified

    def update_from(self, mapping: Mapping[str, Any]) -> None:
        """Overlay the serialized fields found in ``mapping``; others stay as they are."""
        self.resync_method = _optional_str(mapping, "resyncMethod", self.resync_method)
        self.foreign_pods_detect_mode = _optional_str(
            mapping, "foreignPodsDetect", self.foreign_pods_detect_mode
        )
        self.informer_mode = _optional_str(mapping, "informerMode", self.informer_mode)

    def to_dict(self) -> dict[str, Any]:
        # the resync period is never serialized
        fields = {
            "resyncMethod": self.resync_method,
            "foreignPodsDetect": self.foreign_pods_detect_mode,
            "informerMode": self.informer_mode,
        }
        return {key: value for key, value in fields.items() if value is not None}


def new_config_cache_params() -> ConfigCacheParams:
    params = ConfigCacheParams()
    params.set_defaults()
    return params


@dataclass
class ResourceSpecParams:
    """A resource and its weight in the scoring strategy."""

    name: str = ""
    weight: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.weight:
            data["weight"] = self.weight
        return data


@dataclass
class ScoringStrategyParams:
    """Scoring strategy of the topology-aware scheduler plugin."""

    type: str = ""
    resources: list[ResourceSpecParams] = field(default_factory=list)

    def update_from(self, mapping: Mapping[str, Any]) -> None:
        """Overlay the serialized fields found in ``mapping``."""
        if "type" in mapping:
            value = mapping["type"]
            if value is not None and not isinstance(value, str):
                raise SchedParamsError(f"field type must be a string, got {value!r}")
            self.type = value or ""
        if "resources" in mapping:
            raw = mapping["resources"]
            if raw is None:
                self.resources = []
                return
            if not isinstance(raw, list):
                raise SchedParamsError(f"field resources must be a list, got {raw!r}")
            resources = []
            for idx, item in enumerate(raw):
                if not isinstance(item, Mapping):
                    raise SchedParamsError(f"unexpected resources[{idx}] data")
                name = item.get("name") or ""
                weight = item.get("weight") or 0
                if not isinstance(name, str):
                    raise SchedParamsError(f"unexpected resources[{idx}].name data")
                if isinstance(weight, bool) or not isinstance(weight, int):
                    raise SchedParamsError(f"unexpected resources[{idx}].weight data")
                resources.append(ResourceSpecParams(name=name, weight=weight))
            self.resources = resources

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.type:
            data["type"] = self.type
        if self.resources:
            data["resources"] = [res.to_dict() for res in self.resources]
        return data


@dataclass
class LeaderElectionParams:
    """Leader election settings shared by all scheduler profiles."""

    leader_elect: bool = False
    resource_namespace: str = ""
    resource_name: str = ""

    def set_defaults(self) -> None:
        if not self.resource_name:
            self.resource_name = LEADER_ELECTION_DEFAULT_NAME
        if not self.resource_namespace:
            self.resource_namespace = LEADER_ELECTION_DEFAULT_NAMESPACE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"leaderElect": self.leader_elect}
        if self.resource_namespace:
            data["resourceNamespace"] = self.resource_namespace
        if self.resource_name:
            data["resourceName"] = self.resource_name
        return data


@dataclass
class ConfigParams:
    """Parameters of one scheduler profile using the topology-aware plugin."""

    profile_name: str = ""
    cache: ConfigCacheParams | None = None
    scoring_strategy: ScoringStrategyParams | None = None
    leader_election: LeaderElectionParams | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "profileName": self.profile_name,
            "cache": self.cache.to_dict() if self.cache is not None else None,
        }
        if self.scoring_strategy is not None:
            data["scoringStrategy"] = self.scoring_strategy.to_dict()
        data["leaderElection"] = (
            self.leader_election.to_dict() if self.leader_election is not None else None
        )
        return data


_MISSING = object()


def _get(mapping: Mapping[str, Any], key: str) -> Any:
    return mapping.get(key, _MISSING)


def _get_map(mapping: Mapping[str, Any], key: str) -> dict | None:
    value = _get(mapping, key)
    if value is _MISSING:
        return None
    if not isinstance(value, dict):
        raise SchedParamsError(f"field {key} is not a map: {value!r}")
    return value


def _get_list(mapping: Mapping[str, Any], key: str) -> list | None:
    value = _get(mapping, key)
    if value is _MISSING:
        return None
    if not isinstance(value, list):
        raise SchedParamsError(f"field {key} is not a list: {value!r}")
    return value


def _get_str(mapping: Mapping[str, Any], key: str) -> str | None:
    value = _get(mapping, key)
    if value is _MISSING:
        return None
    if not isinstance(value, str):
        raise SchedParamsError(f"field {key} is not a string: {value!r}")
    return value


def _get_number(mapping: Mapping[str, Any], key: str) -> float | int | None:
    value = _get(mapping, key)
    if value is _MISSING:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchedParamsError(f"field {key} is not a number: {value!r}")
    return value


def _get_bool(mapping: Mapping[str, Any], key: str) -> bool | None:
    value = _get(mapping, key)
    if value is _MISSING:
        return None
    if not isinstance(value, bool):
        raise SchedParamsError(f"field {key} is not a bool: {value!r}")
    return value


def _extract_leader_election_params(lead: Mapping[str, Any]) -> LeaderElectionParams:
    params = LeaderElectionParams()
    enabled = _get_bool(lead, "leaderElect")
    if enabled is None:
        raise SchedParamsError("unexpected leaderElect data")
    params.leader_elect = enabled

    namespace = _get_str(lead, "resourceNamespace")
    if namespace is not None:
        params.resource_namespace = namespace
    name = _get_str(lead, "resourceName")
    if name is not None:
        params.resource_name = name
    return params


def _extract_cache_params(cache: ConfigCacheParams, cache_args: Mapping[str, Any]) -> None:
    resync_method = _get_str(cache_args, "resyncMethod")
    if resync_method is not None:
        validate_cache_resync_method(resync_method)
        cache.resync_method = resync_method

    foreign_pods_detect = _get_str(cache_args, "foreignPodsDetect")
    if foreign_pods_detect is not None:
        validate_foreign_pods_detect_mode(foreign_pods_detect)
        cache.foreign_pods_detect_mode = foreign_pods_detect

    informer_mode = _get_str(cache_args, "informerMode")
    if informer_mode is not None:
        validate_cache_informer_mode(informer_mode)
        cache.informer_mode = informer_mode


def _extract_scoring_strategy(args: Mapping[str, Any]) -> ScoringStrategyParams:
    strategy = ScoringStrategyParams()
    scoring_type = _get_str(args, "type")
    if scoring_type is not None:
        validate_scoring_strategy_type(scoring_type)
        strategy.type = scoring_type

    raw_resources = _get_list(args, "resources")
    if raw_resources is not None:
        resources = []
        for idx, raw in enumerate(raw_resources):
            if not isinstance(raw, dict):
                raise SchedParamsError(f"unexpected scoringStrategy.resources[{idx}] data")
            try:
                name = _get_str(raw, "name")
                weight = _get_number(raw, "weight")
            except SchedParamsError as err:
                raise SchedParamsError(
                    f"unexpected scoringStrategy.resources[{idx}] data (err={err})"
                ) from err
            if name is None:
                raise SchedParamsError(f"unexpected scoringStrategy.resources[{idx}].name data")
            if weight is None:
                raise SchedParamsError(f"unexpected scoringStrategy.resources[{idx}].weight data")
            resources.append(ResourceSpecParams(name=name, weight=int(weight)))
        strategy.resources = resources
    return strategy


def _extract_params(profile_name: str, args: Mapping[str, Any]) -> ConfigParams:
    params = ConfigParams(profile_name=profile_name, cache=ConfigCacheParams())

    # numbers may come back as floats, yet the period is an integer count
    resync_period = _get_number(args, "cacheResyncPeriodSeconds")
    if resync_period is not None:
        params.cache.resync_period_seconds = int(resync_period)

    cache_args = _get_map(args, "cache")
    if cache_args is not None:
        _extract_cache_params(params.cache, cache_args)

    scoring_args = _get_map(args, "scoringStrategy")
    if scoring_args is not None:
        params.scoring_strategy = _extract_scoring_strategy(scoring_args)

    return params


def _load_config(data: bytes | str | None) -> dict | None:
    try:
        loaded = yaml.safe_load(data or "")
    except yaml.YAMLError as err:
        log.error("cannot unmarshal scheduler config: %s", err)
        return None
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        log.error("cannot unmarshal scheduler config: not a map")
        return None
    return loaded


def decode_scheduler_profiles_from_data(data: bytes | str | None) -> list[ConfigParams]:
    """Decode the parameters of every profile configuring the topology-aware plugin.

    Malformed data is logged and yields the profiles decoded so far; a
    ``leaderElection`` entry which is not a map raises ``SchedParamsError``.
    """
    params: list[ConfigParams] = []

    config = _load_config(data)
    if config is None:
        return params

    lead = _get_map(config, "leaderElection")
    elect_params = None
    if lead is not None:
        try:
            elect_params = _extract_leader_election_params(lead)
        except SchedParamsError as err:
            log.error("failed to extract leader election params: %s", err)
            return params

    try:
        profiles = _get_list(config, "profiles")
    except SchedParamsError as err:
        log.error("failed to process profiles: %s", err)
        return params
    if profiles is None:
        log.error("failed to process unstructured data: missing profiles")
        return params

    for profile in profiles:
        if not isinstance(profile, dict):
            log.debug("unexpected profile data")
            return params
        try:
            profile_name = _get_str(profile, "schedulerName")
            plugin_configs = _get_list(profile, "pluginConfig")
        except SchedParamsError as err:
            log.error("failed to process profile: %s", err)
            return params
        if profile_name is None:
            log.error("failed to get profile name")
            return params
        if plugin_configs is None:
            log.error("failed to process unstructured data: missing pluginConfig")
            return params

        for plugin_conf in plugin_configs:
            if not isinstance(plugin_conf, dict):
                log.debug("unexpected profile config data")
                return params
            try:
                name = _get_str(plugin_conf, "name")
            except SchedParamsError as err:
                log.error("failed to process plugin name: %s", err)
                return params
            if name is None:
                log.error("failed to process unstructured data: missing name")
                return params
            if name != SCHEDULER_PLUGIN_NAME:
                continue
            try:
                args = _get_map(plugin_conf, "args")
            except SchedParamsError as err:
                log.error("failed to process plugin args: %s", err)
                return params
            if args is None:
                log.error("failed to process unstructured data: missing args")
                return params

            try:
                profile_params = _extract_params(profile_name, args)
            except SchedParamsError as err:
                log.error("failed to extract params name=%s profile=%s: %s", name, profile_name, err)
                continue
            # leader election is global, so every profile carries the same settings
            profile_params.leader_election = elect_params
            params.append(profile_params)

    return params


def find_scheduler_profile_by_name(
    profile_params: Iterable[ConfigParams], scheduler_name: str
) -> ConfigParams | None:
    """Return the first profile named ``scheduler_name``, or None."""
    return next((p for p in profile_params if p.profile_name == scheduler_name), None)