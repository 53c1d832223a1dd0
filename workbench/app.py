from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .config import (
    LoadedConfig,
    OrderedOptions,
    copy_into_config,
    load_workbench_config,
    validate_wb2_url_config,
)
from .config.cluster import DEFAULT_TOOL_COMMAND, tool_runner

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9000
DEFAULT_CONFIG_DIR = Path(os.environ.get("WORKBENCH_CONFIG_DIR", "config"))
DEFAULT_ENVIRONMENT = os.environ.get("WORKBENCH_ENV", "production")

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    config_dir: Path = DEFAULT_CONFIG_DIR
    environment: str = DEFAULT_ENVIRONMENT
    tool_command: Tuple[str, ...] = DEFAULT_TOOL_COMMAND
    tool_timeout: Optional[float] = 60.0
    log_level: str = "info"


@dataclass
class AppState:
    """Container for FastAPI state shared across request handlers.

    ``settings`` holds the effective configuration (and any unmigrated
    legacy keys) with attribute access, e.g.
    ``state.settings.Workbench.SiteName``. The session signing secret is
    kept apart in ``secret_key_base``.
    """

    config: ServerConfig
    loaded: LoadedConfig
    templates: Jinja2Templates
    settings: OrderedOptions = field(default_factory=OrderedOptions)
    secret_key_base: str = ""
    wb2_url_configured: bool = False

    @property
    def management_token(self) -> str:
        return str(self.settings.get("ManagementToken") or "")


def get_app_state(request: Request) -> AppState:
    state = getattr(request.app.state, "workbench", None)
    if state is None:
        raise RuntimeError("Application state has not been initialised")
    return state


def load_config(config: ServerConfig) -> LoadedConfig:
    runner = tool_runner(config.tool_command, timeout=config.tool_timeout)
    return load_workbench_config(config.config_dir, config.environment, runner=runner)


def create_app(config: Optional[ServerConfig] = None, loaded: Optional[LoadedConfig] = None) -> FastAPI:
    config = config or ServerConfig()
    loaded = loaded or load_config(config)

    base_dir = Path(__file__).resolve().parent
    templates = Jinja2Templates(directory=str(base_dir / "templates"))

    state = AppState(config=config, loaded=loaded, templates=templates)
    copy_into_config(loaded.config, state.settings)
    copy_into_config(loaded.remaining, state.settings)
    state.secret_key_base = loaded.config["Workbench"]["SecretKeyBase"]
    state.wb2_url_configured = validate_wb2_url_config(state.settings)

    app = FastAPI(title=state.settings.Workbench.SiteName or "Workbench", version="1.0.0")
    app.state.workbench = state
    logger.info("Workbench configured for cluster %s", loaded.cluster_id)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request, state: AppState = Depends(get_app_state)) -> HTMLResponse:
        workbench = state.settings.Workbench
        context: Dict[str, Any] = {
            "request": request,
            "title": workbench.SiteName,
            "cluster_id": state.loaded.cluster_id,
            "workbench2_url": state.settings.Services.Workbench2.ExternalURL,
            "docsite": workbench.ArvadosDocsite,
            "support_email": state.settings.Mail.SupportEmailAddress,
        }
        return state.templates.TemplateResponse(request, "index.html", context)

    from .api import config as config_routes
    from .api import status

    app.include_router(status.router)
    app.include_router(config_routes.router)

    return app


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "AppState",
    "ServerConfig",
    "create_app",
    "get_app_state",
    "load_config",
]
