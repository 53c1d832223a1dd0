"""Declarative loader that migrates legacy keys and coerces configuration."""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional

import yaml

from .coercion import ConfigType, NonemptyString, coerce_value

logger = logging.getLogger(__name__)

Transform = Callable[[MutableMapping[str, Any], str, Any], None]


class ConfigError(RuntimeError):
    """Base exception for loader errors."""


class MissingRequiredConfig(ConfigError):
    """Raised when a required key is absent or empty."""

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{key} cannot be empty")
        self.key = key


class InvalidConfigType(ConfigError):
    """Raised when a key holds a value of the wrong type."""

    def __init__(self, key: str, expected: ConfigType, value: Any, detail: Optional[str] = None) -> None:
        message = f"{key} expected {expected!r} but was {type(value).__name__} ({value!r})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.key = key
        self.expected = expected
        self.value = value


def deep_merge(base: Mapping[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``update`` into ``base`` without mutating either."""

    merged: Dict[str, Any] = deepcopy(dict(base))
    for key, value in update.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def _parent(cfg: Any, path: str) -> tuple[Any, str]:
    *sections, leaf = path.split(".")
    for section in sections:
        if not isinstance(cfg, Mapping):
            return None, leaf
        cfg = cfg.get(section)
    if not isinstance(cfg, Mapping):
        return None, leaf
    return cfg, leaf


def get_cfg(cfg: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read the value at dotted ``path`` or return ``default``."""

    parent, leaf = _parent(cfg, path)
    if parent is None:
        return default
    return parent.get(leaf, default)


def set_cfg(cfg: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Set ``a.b.c`` to ``value``; a missing parent section makes this a no-op."""

    parent, leaf = _parent(cfg, path)
    if parent is not None:
        parent[leaf] = value


def load_yaml(path: Path) -> Any:
    """Parse a YAML file, returning ``None`` when it is missing or empty."""

    if not path.exists():
        return None
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc


@dataclass(frozen=True)
class ConfigDeclaration:
    path: str
    type: ConfigType
    legacy_key: Optional[str] = None
    transform: Optional[Transform] = None


class ConfigLoader:
    """Registry of declared keys with their legacy names and transforms."""

    def __init__(self) -> None:
        self._declarations: Dict[str, ConfigDeclaration] = {}
        self._migrations: Dict[str, ConfigDeclaration] = {}

    @property
    def declarations(self) -> List[ConfigDeclaration]:
        return list(self._declarations.values())

    def declare_config(
        self,
        path: str,
        config_type: ConfigType,
        legacy_key: Optional[str] = None,
        transform: Optional[Transform] = None,
    ) -> ConfigDeclaration:
        """Register ``path`` with its expected type and optional legacy source."""

        previous = self._declarations.pop(path, None)
        if previous is not None and previous.legacy_key is not None:
            self._migrations.pop(previous.legacy_key, None)
        declaration = ConfigDeclaration(path, config_type, legacy_key, transform)
        self._declarations[path] = declaration
        if legacy_key is not None:
            self._migrations[legacy_key] = declaration
        return declaration

    def migrate_config(
        self,
        legacy: Mapping[str, Any],
        target: MutableMapping[str, Any],
    ) -> Dict[str, Any]:
        """Copy declared legacy keys into ``target`` and return the leftovers."""

        remaining: Dict[str, Any] = {}
        for key, value in legacy.items():
            declaration = self._migrations.get(str(key))
            if declaration is None:
                remaining[key] = value
                continue
            logger.debug("Migrating legacy key %s to %s", key, declaration.path)
            if declaration.transform is not None:
                declaration.transform(target, declaration.path, value)
            else:
                set_cfg(target, declaration.path, value)
        return remaining

    def coercion_and_check(
        self,
        cfg: MutableMapping[str, Any],
        check_nonempty: bool = True,
    ) -> MutableMapping[str, Any]:
        """Coerce declared keys in place and validate their types.

        With ``check_nonempty`` set, an empty :data:`NonemptyString` raises
        :class:`MissingRequiredConfig`.
        """

        for declaration in self._declarations.values():
            parent, leaf = _parent(cfg, declaration.path)
            if parent is None:
                raise MissingRequiredConfig(declaration.path, f"missing {declaration.path}")

            value = parent.get(leaf)
            if declaration.type is NonemptyString and not value and check_nonempty:
                raise MissingRequiredConfig(declaration.path)

            try:
                value = coerce_value(declaration.type, value)
            except (ValueError, OverflowError) as exc:
                raise InvalidConfigType(declaration.path, declaration.type, value, str(exc)) from exc
            if not declaration.type.accepts(value):
                raise InvalidConfigType(declaration.path, declaration.type, value)
            parent[leaf] = value
        return cfg


__all__ = [
    "ConfigDeclaration",
    "ConfigError",
    "ConfigLoader",
    "InvalidConfigType",
    "MissingRequiredConfig",
    "Transform",
    "deep_merge",
    "get_cfg",
    "load_yaml",
    "set_cfg",
]
