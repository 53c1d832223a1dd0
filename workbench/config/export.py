"""Render loaded configuration for the ``config-dump``/``config-migrate`` commands."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Mapping

import yaml

from .bootstrap import LoadedConfig
from .coercion import format_duration

REDACTED = "xxxxxxxx"
SECRET_KEYS = (
    "ManagementToken",
    "Users.AnonymousUserToken",
    "Workbench.SecretToken",
    "Workbench.SecretKeyBase",
)


class _ConfigDumper(yaml.SafeDumper):
    pass


def _represent_duration(dumper: yaml.SafeDumper, value: timedelta) -> yaml.Node:
    return dumper.represent_str(format_duration(value))


_ConfigDumper.add_representer(timedelta, _represent_duration)


def config_diff(base: Mapping[str, Any], current: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the entries of ``current`` that are absent from or differ in ``base``."""

    diff: Dict[str, Any] = {}
    for key, value in current.items():
        if key not in base:
            diff[key] = value
        elif isinstance(value, Mapping) and isinstance(base[key], Mapping):
            nested = config_diff(base[key], value)
            if nested:
                diff[key] = nested
        elif base[key] != value:
            diff[key] = value
    return diff


def config_dump_payload(loaded: LoadedConfig) -> Dict[str, Any]:
    return {"Clusters": {loaded.cluster_id: _without_cluster_id(loaded.config)}}


def config_migrate_payload(loaded: LoadedConfig) -> Dict[str, Any]:
    """Only the keys the legacy files changed, ready to paste into the cluster config."""

    diff = config_diff(loaded.cluster, loaded.config)
    return {"Clusters": {loaded.cluster_id: _without_cluster_id(diff)}}


def redact_secrets(config: Mapping[str, Any]) -> Dict[str, Any]:
    redacted = _copy_mappings(config)
    for path in SECRET_KEYS:
        *sections, leaf = path.split(".")
        node: Any = redacted
        for section in sections:
            node = node.get(section) if isinstance(node, dict) else None
        if isinstance(node, dict) and node.get(leaf):
            node[leaf] = REDACTED
    return redacted


def to_plain(value: Any) -> Any:
    """Convert durations to strings so the result is JSON serialisable."""

    if isinstance(value, Mapping):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, timedelta):
        return format_duration(value)
    return value


def dump_yaml(payload: Mapping[str, Any]) -> str:
    return yaml.dump(
        _copy_mappings(payload),
        Dumper=_ConfigDumper,
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
    )


def _copy_mappings(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy_mappings(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy_mappings(item) for item in value]
    return value


def _without_cluster_id(config: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in config.items() if key != "ClusterID"}


__all__ = [
    "REDACTED",
    "SECRET_KEYS",
    "config_diff",
    "config_dump_payload",
    "config_migrate_payload",
    "dump_yaml",
    "redact_secrets",
    "to_plain",
]
