"""Type markers and value coercion for declared configuration keys."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Optional
from urllib.parse import urlsplit, urlunsplit

from pydantic import TypeAdapter, ValidationError


class ConfigType:
    """Marker describing the expected type of a declared key."""

    def __init__(self, name: str, python_type: Any) -> None:
        self.name = name
        self.python_type = python_type

    def accepts(self, value: Any) -> bool:
        if self.python_type is int and isinstance(value, bool):
            return False
        return isinstance(value, self.python_type)

    def __repr__(self) -> str:
        return self.name


String = ConfigType("String", str)
NonemptyString = ConfigType("NonemptyString", str)
Boolean = ConfigType("Boolean", bool)
Integer = ConfigType("Integer", int)
Duration = ConfigType("Duration", timedelta)
URL = ConfigType("URL", str)
Hash = ConfigType("Hash", dict)
Array = ConfigType("Array", list)


_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1,
    "m": 60,
    "h": 3600,
}

_SIZE_PATTERN = re.compile(r"^(-?\d*\.?\d+)\s*([KMGTPE]i?)$")
_SIZE_MULTIPLIERS = {
    "K": 1000,
    "Ki": 1 << 10,
    "M": 1000**2,
    "Mi": 1 << 20,
    "G": 1000**3,
    "Gi": 1 << 30,
    "T": 1000**4,
    "Ti": 1 << 40,
    "P": 1000**5,
    "Pi": 1 << 50,
    "E": 1000**6,
    "Ei": 1 << 60,
}

_BOOL_ADAPTER = TypeAdapter(bool)
_INT_ADAPTER = TypeAdapter(int)


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration such as ``1h30m`` or ``-2.5s``.

    Raises ``ValueError`` when the string does not follow the grammar.
    """

    remaining = text.strip()
    sign = 1
    if remaining.startswith("-"):
        sign = -1
        remaining = remaining[1:]
    elif remaining.startswith("+"):
        remaining = remaining[1:]
    if remaining == "0":
        return timedelta(0)
    if not remaining:
        raise ValueError(f"not a valid duration: {text!r}")

    seconds = 0.0
    while remaining:
        match = _DURATION_PART.match(remaining)
        if match is None:
            raise ValueError(
                f"not a valid duration: {text!r}, accepted suffixes are h, m, s, ms, us, ns"
            )
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        remaining = remaining[match.end():]
    return timedelta(seconds=sign * seconds)


def format_duration(value: timedelta) -> str:
    """Render a duration the way the cluster tools print it (``1h2m3s``)."""

    total = value.total_seconds()
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(int(total), 3600)
    minutes, seconds = divmod(rest, 60)
    fraction = total - int(total)

    out = ""
    if hours:
        out += f"{hours}h"
    if minutes:
        out += f"{minutes}m"
    if seconds or fraction:
        if fraction:
            out += f"{seconds + fraction:g}s"
        else:
            out += f"{seconds}s"
    return sign + out if out else "0s"


def parse_size(text: str) -> int:
    """Parse an integer with an optional byte-size suffix (``64Mi``, ``1GB``)."""

    value = re.sub(r"B\s*$", "", text.strip())
    match = _SIZE_PATTERN.match(value)
    if match is None:
        return _INT_ADAPTER.validate_python(value)
    number = match.group(1)
    multiplier = _SIZE_MULTIPLIERS[match.group(2)]
    if "." in number:
        return int(float(number) * multiplier)
    return int(number) * multiplier


def normalise_url(value: Optional[str]) -> str:
    if not value:
        return ""
    parts = urlsplit(value.strip())
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"not an absolute URL: {value!r}")
    return urlunsplit(parts)


def strip_url_path(value: str) -> str:
    """Return ``value`` with an empty path; query and fragment are kept."""

    if not value:
        return ""
    parts = urlsplit(value)
    return urlunsplit(parts._replace(path=""))


def coerce_value(config_type: ConfigType, value: Any) -> Any:
    """Convert ``value`` toward ``config_type`` where a conversion is defined.

    Values without a matching conversion are returned unchanged; the caller
    is responsible for the final type check.
    """

    if config_type in (String, NonemptyString):
        # unset legacy strings are written as `false`
        return "" if value is None or value is False else value
    if config_type is URL:
        if value is None or value is False:
            return ""
        if isinstance(value, str):
            return normalise_url(value)
        return value
    if config_type is Duration:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return timedelta(seconds=value)
        if isinstance(value, str):
            return parse_duration(value)
        return value
    if config_type is Integer and isinstance(value, str):
        return parse_size(value)
    if config_type is Boolean and isinstance(value, str):
        try:
            return _BOOL_ADAPTER.validate_python(value.strip())
        except ValidationError as exc:
            raise ValueError(f"not a boolean: {value!r}") from exc
    return value


__all__ = [
    "Array",
    "Boolean",
    "ConfigType",
    "Duration",
    "Hash",
    "Integer",
    "NonemptyString",
    "String",
    "URL",
    "coerce_value",
    "format_duration",
    "normalise_url",
    "parse_duration",
    "parse_size",
    "strip_url_path",
]
