"""Utility helpers shared by the sitegraph configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import ConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _resolve_dir(root: Path, value: object, *, key: str, default: str) -> Path:
    """Resolve a configured directory against the config file's directory."""
    match value:
        case None:
            candidate = Path(default)
        case str() | Path():
            candidate = Path(value)
        case _:
            msg = f"'{key}' must be a path string, got {type(value).__name__}."
            raise ConfigError(msg)
    if candidate.is_absolute():
        return candidate
    return root / candidate


def _coerce_bool(value: object, *, key: str, default: bool) -> bool:
    """Return ``value`` as a bool, rejecting anything but YAML booleans."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    msg = f"'{key}' must be true or false, got {value!r}."
    raise ConfigError(msg)


def _coerce_non_negative_int(value: object, *, key: str, default: int) -> int:
    """Return ``value`` as an int >= 0."""
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{key}' must be an integer, got {value!r}."
        raise ConfigError(msg)
    if value < 0:
        msg = f"'{key}' must not be negative, got {value}."
        raise ConfigError(msg)
    return value


def _coerce_mapping(value: object, *, key: str) -> dict[str, typ.Any]:
    """Return a shallow dict copy of a mapping value."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise ConfigError(msg)
    return dict(value)


__all__ = [
    "_coerce_bool",
    "_coerce_mapping",
    "_coerce_non_negative_int",
    "_optional_str",
    "_resolve_dir",
]
