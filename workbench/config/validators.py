from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

from .loader import ConfigError, get_cfg

_MULTIPLE_TRAILING_SLASHES = re.compile(r".*/{2,}$")


def validate_wb2_url_config(settings: Any) -> bool:
    """Check ``Services.Workbench2.ExternalURL``; ``False`` when it is unset."""

    url = get_cfg(settings, "Services.Workbench2.ExternalURL") or ""
    if not url:
        return False
    if urlsplit(url).scheme not in ("http", "https"):
        raise ConfigError(f"workbench2_url config is not an HTTP URL: {url}")
    if _MULTIPLE_TRAILING_SLASHES.match(url):
        raise ConfigError(f"workbench2_url config shouldn't have multiple trailing slashes: {url}")
    return True


__all__ = ["validate_wb2_url_config"]
