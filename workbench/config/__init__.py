"""Configuration helpers for the Workbench server."""

from .bootstrap import LoadedConfig, load_workbench_config
from .declarations import build_config_loader
from .loader import (
    ConfigDeclaration,
    ConfigError,
    ConfigLoader,
    InvalidConfigType,
    MissingRequiredConfig,
    deep_merge,
    get_cfg,
    set_cfg,
)
from .options import OrderedOptions, copy_into_config
from .validators import validate_wb2_url_config

__all__ = [
    "ConfigDeclaration",
    "ConfigError",
    "ConfigLoader",
    "InvalidConfigType",
    "LoadedConfig",
    "MissingRequiredConfig",
    "OrderedOptions",
    "build_config_loader",
    "copy_into_config",
    "deep_merge",
    "get_cfg",
    "load_workbench_config",
    "set_cfg",
    "validate_wb2_url_config",
]
