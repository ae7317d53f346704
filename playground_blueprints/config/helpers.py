"""Utility helpers shared by the extractor configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import ExtractorConfigError


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> dict[str, typ.Any]:
    """Return the mapping stored under ``key``, or an empty one."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"Configuration section '{key}' must be a mapping."
        raise ExtractorConfigError(msg)
    return value


def _optional_path(value: object | None) -> Path | None:
    """Return a path for non-empty values, otherwise None."""
    if value is None:
        return None
    text = str(value).strip()
    return Path(text) if text else None


def _as_bool(value: object, *, field: str) -> bool:
    """Accept YAML booleans only; quoted strings are rejected."""
    if isinstance(value, bool):
        return value
    msg = f"'{field}' must be true or false, got {value!r}"
    raise ExtractorConfigError(msg)


def _as_timeout(value: object) -> float:
    """Return a positive timeout in seconds."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"'timeout' must be a number of seconds, got {value!r}"
        raise ExtractorConfigError(msg)
    if value <= 0:
        msg = f"'timeout' must be positive, got {value!r}"
        raise ExtractorConfigError(msg)
    return float(value)


def _normalize_slugs(value: str | list[object] | None) -> list[str]:
    """Normalize an ignore list into non-empty slugs, keeping their order."""
    if isinstance(value, str):
        candidates: list[object] = list(value.split(","))
    elif isinstance(value, list):
        candidates = value
    elif value is None:
        return []
    else:
        msg = f"'ignore' must be a list of slugs, got {value!r}"
        raise ExtractorConfigError(msg)
    slugs: list[str] = []
    for candidate in candidates:
        text = str(candidate).strip()
        if text and text not in slugs:
            slugs.append(text)
    return slugs


__all__ = [
    "_as_bool",
    "_as_timeout",
    "_normalize_slugs",
    "_optional_path",
    "_section",
]
