"""Serialization of Kubernetes objects to and from YAML manifests."""

from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Mapping
from typing import Any, TextIO

import yaml

_FIELDS_TO_REMOVE = (
    ("metadata", "creationTimestamp"),
    ("template", "metadata", "creationTimestamp"),
    ("spec", "template", "metadata", "creationTimestamp"),
    ("status",),
)


def _as_mapping(obj: Any) -> dict[str, Any]:
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    if not isinstance(obj, Mapping):
        raise TypeError(f"cannot serialize object of type {type(obj).__name__}")
    # a JSON round trip both deep-copies and rejects what JSON cannot carry
    return json.loads(json.dumps(obj))


def _remove_nested_field(obj: dict[str, Any], *fields: str) -> None:
    current: Any = obj
    for name in fields[:-1]:
        if not isinstance(current, dict):
            return
        current = current.get(name)
    if isinstance(current, dict):
        current.pop(fields[-1], None)


def serialize_object(obj: Any, out: TextIO) -> None:
    """Write ``obj`` as YAML, without its status and creation timestamps."""
    data = _as_mapping(obj)
    for fields in _FIELDS_TO_REMOVE:
        _remove_nested_field(data, *fields)
    yaml.safe_dump(data, out, default_flow_style=False, sort_keys=True, allow_unicode=True)


def serialize_object_to_data(obj: Any) -> bytes:
    """Return the YAML serialization of ``obj`` as UTF-8 bytes."""
    data = _as_mapping(obj)
    for fields in _FIELDS_TO_REMOVE:
        _remove_nested_field(data, *fields)
    text = yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)
    return text.encode("utf-8")


def deserialize_object_from_data(data: bytes | str) -> dict[str, Any]:
    """Decode a YAML or JSON manifest into a Kubernetes object mapping.

    Raises ``ValueError`` if the data cannot be parsed or lacks a kind or apiVersion.
    """
    try:
        obj = yaml.safe_load(data)
    except yaml.YAMLError as err:
        raise ValueError(f"cannot decode object: {err}") from err
    if not isinstance(obj, dict):
        raise ValueError("cannot decode object: not a map")
    for key in ("kind", "apiVersion"):
        value = obj.get(key)
        if not isinstance(value, str) or not value:
            raise ValueError(f"Object '{key}' is missing in decoded data")
    return copy.deepcopy(obj)


def render_objects(objs: Iterable[Any], out: TextIO) -> None:
    """Write every object as a YAML document, each preceded by a separator."""
    for obj in objs:
        out.write("---\n")
        serialize_object(obj, out)