"""Miscellaneous helper utilities for GitPanel."""

from __future__ import annotations

import datetime as _dt
import os
import re
from typing import Any

_DURATION_PATTERN = re.compile(r"^\s*(\d+)([smhd])\s*$")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dictionary with override merged into base."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def parse_duration(value: str) -> _dt.timedelta:
    """Parse duration strings like ``3s`` or ``5m`` into timedeltas."""
    match = _DURATION_PATTERN.match(value)
    if not match:
        raise ValueError(f"Unsupported duration value: {value!r}")

    amount = int(match.group(1))
    unit = match.group(2)
    if unit == "s":
        return _dt.timedelta(seconds=amount)
    if unit == "m":
        return _dt.timedelta(minutes=amount)
    if unit == "h":
        return _dt.timedelta(hours=amount)
    if unit == "d":
        return _dt.timedelta(days=amount)
    raise ValueError(f"Unsupported duration unit: {unit}")  # pragma: no cover


def env_first(*keys: str, default: str | None = None) -> str | None:
    """Return the first non-empty environment variable among keys."""
    for key in keys:
        value = os.environ.get(key)
        if value:
            return value
    return default
