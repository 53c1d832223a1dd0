"""Read the legacy ``application.yml`` files being phased out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from .loader import ConfigError, deep_merge, load_yaml

logger = logging.getLogger(__name__)

LEGACY_FILES: Sequence[str] = ("application.default.yml", "application.yml")


def load_legacy_config(config_dir: Path, environment: str) -> Dict[str, Any]:
    """Merge the ``common`` and ``environment`` sections of each legacy file.

    Later files and the environment section take precedence. Missing and
    empty files are skipped.
    """

    merged: Dict[str, Any] = {}
    for name in LEGACY_FILES:
        path = Path(config_dir) / name
        document = load_yaml(path)
        if not document:
            continue
        if not isinstance(document, Mapping):
            raise ConfigError(f"{path} must contain a YAML mapping")
        logger.debug("Reading legacy configuration from %s", path)
        for section in ("common", environment):
            values = document.get(section) or {}
            if not isinstance(values, Mapping):
                raise ConfigError(f"Section {section!r} in {path} must be a mapping")
            merged = deep_merge(merged, values)
    return merged


__all__ = ["LEGACY_FILES", "load_legacy_config"]
