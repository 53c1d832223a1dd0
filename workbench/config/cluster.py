"""Obtain cluster configuration from the cluster's config tool."""

from __future__ import annotations

import logging
import subprocess
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

import yaml

from .loader import ConfigError, deep_merge, load_yaml

logger = logging.getLogger(__name__)

DEFAULT_TOOL_COMMAND: Tuple[str, ...] = ("arvados-server",)
BUNDLED_DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.yml"

Runner = Callable[[str], Optional[Dict[str, Any]]]


def run_config_tool(
    subcommand: str,
    command: Sequence[str] = DEFAULT_TOOL_COMMAND,
    timeout: Optional[float] = None,
) -> Optional[Dict[str, Any]]:
    """Run ``<command> <subcommand>`` and parse its YAML output.

    Returns ``None`` if the tool cannot be run, exits non-zero or prints
    something that is not a non-empty mapping.
    """

    args = [*command, subcommand]
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout, check=False)
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.warning("Could not run %s: %s", " ".join(args), exc)
        return None
    if result.returncode != 0:
        logger.warning(
            "%s exited with status %d: %s",
            " ".join(args),
            result.returncode,
            (result.stderr or "").strip(),
        )
        return None
    try:
        payload = yaml.safe_load(result.stdout)
    except yaml.YAMLError as exc:
        logger.warning("Could not parse output of %s: %s", " ".join(args), exc)
        return None
    if not payload or not isinstance(payload, Mapping):
        logger.warning("%s produced no configuration", " ".join(args))
        return None
    return dict(payload)


def first_cluster(payload: Optional[Mapping[str, Any]]) -> Optional[Tuple[str, Dict[str, Any]]]:
    """Return ``(cluster_id, config)`` for the first entry under ``Clusters``."""

    if not payload:
        return None
    clusters = payload.get("Clusters")
    if not isinstance(clusters, Mapping) or not clusters:
        return None
    cluster_id, cluster_config = next(iter(clusters.items()))
    if not isinstance(cluster_config, Mapping):
        return None
    return str(cluster_id), dict(cluster_config)


def bundled_defaults() -> Tuple[str, Dict[str, Any]]:
    """Return the defaults that ship with the package."""

    cluster = first_cluster(load_yaml(BUNDLED_DEFAULTS_PATH))
    if cluster is None:
        raise ConfigError(f"{BUNDLED_DEFAULTS_PATH} does not define a cluster")
    return cluster


def load_cluster_defaults(runner: Runner) -> Dict[str, Any]:
    cluster = first_cluster(runner("config-defaults"))
    if cluster is None:
        logger.warning("Using bundled configuration defaults")
        cluster = bundled_defaults()
    cluster_id, config = cluster
    config["ClusterID"] = cluster_id
    return config


def load_cluster_config(defaults: Mapping[str, Any], runner: Runner) -> Dict[str, Any]:
    """Layer the cluster-wide configuration on top of ``defaults``."""

    cluster = first_cluster(runner("config-dump"))
    if cluster is None:
        # Nothing beyond the defaults; the legacy files are the only overrides.
        logger.warning("No cluster configuration available, using defaults")
        return deepcopy(dict(defaults))
    cluster_id, config = cluster
    merged = deep_merge(defaults, config)
    merged["ClusterID"] = cluster_id
    logger.info("Loaded cluster configuration for %s", cluster_id)
    return merged


def tool_runner(command: Sequence[str] = DEFAULT_TOOL_COMMAND, timeout: Optional[float] = None) -> Runner:
    """Bind ``command`` and ``timeout`` into a runner for the load functions."""

    def _run(subcommand: str) -> Optional[Dict[str, Any]]:
        return run_config_tool(subcommand, command=command, timeout=timeout)

    return _run


__all__ = [
    "BUNDLED_DEFAULTS_PATH",
    "DEFAULT_TOOL_COMMAND",
    "Runner",
    "bundled_defaults",
    "first_cluster",
    "load_cluster_config",
    "load_cluster_defaults",
    "run_config_tool",
    "tool_runner",
]
