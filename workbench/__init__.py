from __future__ import annotations

from .app import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_ENVIRONMENT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    AppState,
    ServerConfig,
    create_app,
    get_app_state,
)

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "AppState",
    "ServerConfig",
    "create_app",
    "get_app_state",
]
