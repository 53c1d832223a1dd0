"""API routers for the Workbench FastAPI application."""

from . import config, status

__all__ = ["config", "status"]
