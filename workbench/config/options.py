"""Attribute-style views of configuration for use by request handlers."""

from __future__ import annotations

from typing import Any, Mapping


class OrderedOptions(dict):
    """A ``dict`` whose keys can also be read and written as attributes.

    ``settings.Workbench.SiteName`` and ``settings["Workbench"]["SiteName"]``
    refer to the same value.
    """

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError as exc:
            raise AttributeError(name) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self[name]
        except KeyError as exc:
            raise AttributeError(name) from exc


def to_ordered_options(value: Any) -> Any:
    if isinstance(value, Mapping):
        return OrderedOptions((key, to_ordered_options(item)) for key, item in value.items())
    if isinstance(value, list):
        return [to_ordered_options(item) for item in value]
    return value


def copy_into_config(src: Mapping[str, Any], dst: Any) -> None:
    """Set every top-level key of ``src`` as an attribute of ``dst``."""

    for key, value in src.items():
        setattr(dst, str(key), to_ordered_options(value))


__all__ = ["OrderedOptions", "copy_into_config", "to_ordered_options"]
