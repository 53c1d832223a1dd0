"""Startup sequence that produces the effective Workbench configuration.

The three snapshots kept on :class:`LoadedConfig` are:

* ``defaults``: the cluster defaults,
* ``cluster``: the defaults merged with the cluster-wide configuration,
* ``config``: ``cluster`` with the legacy ``application.yml`` keys migrated
  in. This is what the application uses.

``defaults`` and ``cluster`` are kept for the ``config-dump`` and
``config-migrate`` commands.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .cluster import Runner, load_cluster_config, load_cluster_defaults, tool_runner
from .declarations import build_config_loader
from .legacy import load_legacy_config
from .loader import ConfigLoader

logger = logging.getLogger(__name__)


@dataclass
class LoadedConfig:
    cluster_id: str
    defaults: Dict[str, Any]
    cluster: Dict[str, Any]
    config: Dict[str, Any]
    remaining: Dict[str, Any] = field(default_factory=dict)


def load_workbench_config(
    config_dir: Path,
    environment: str = "production",
    runner: Optional[Runner] = None,
    loader: Optional[ConfigLoader] = None,
) -> LoadedConfig:
    """Build, migrate and validate the configuration used at startup.

    Raises :class:`~workbench.config.loader.MissingRequiredConfig` or
    :class:`~workbench.config.loader.InvalidConfigType` when the final
    configuration is unusable.
    """

    runner = runner or tool_runner()
    loader = loader or build_config_loader()

    defaults = load_cluster_defaults(runner)
    cluster = load_cluster_config(defaults, runner)
    config = deepcopy(cluster)

    legacy = load_legacy_config(config_dir, environment)
    remaining = loader.migrate_config(legacy, config)
    if remaining:
        logger.info("Unmigrated legacy configuration keys: %s", ", ".join(sorted(map(str, remaining))))

    loader.coercion_and_check(defaults, check_nonempty=False)
    loader.coercion_and_check(cluster, check_nonempty=False)
    loader.coercion_and_check(config, check_nonempty=True)

    return LoadedConfig(
        cluster_id=str(config.get("ClusterID", "")),
        defaults=defaults,
        cluster=cluster,
        config=config,
        remaining=remaining,
    )


__all__ = ["LoadedConfig", "load_workbench_config"]
