"""Environment parsing helpers shared by the config modules."""

from __future__ import annotations

import os

_DISABLED_VALUES = {"0", "none", "null", "disabled", "disable", "off", "false", "no"}
_ENABLED_VALUES = {"1", "true", "yes", "y", "on"}


def get_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        return float(raw)
    except Exception:
        return float(default)


def get_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except Exception:
        return int(default)


def get_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return bool(default)
    if raw in _DISABLED_VALUES:
        return False
    return raw in _ENABLED_VALUES


def get_list(name: str) -> list[str]:
    raw = (os.getenv(name) or "").strip()
    return [item.strip() for item in raw.split(",") if item.strip()]


__all__ = ["get_bool", "get_float", "get_int", "get_list", "get_str"]
