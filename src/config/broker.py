"""Session broker configuration (env-resolved constants only)."""

from __future__ import annotations

from .env import get_str, get_float, get_list

SESSION_ENDPOINT_PATH: str = "/session"

DEFAULT_LANGUAGE: str = "en"

# Unclaimed relay slots are evicted after this long.
SLOT_TTL_S: float = get_float("SLOT_TTL_S", 30 * 60)
if SLOT_TTL_S <= 0:
    SLOT_TTL_S = float(30 * 60)

SLOT_SWEEP_INTERVAL_S: float = get_float("SLOT_SWEEP_INTERVAL_S", 5 * 60)
if SLOT_SWEEP_INTERVAL_S <= 0:
    SLOT_SWEEP_INTERVAL_S = float(5 * 60)

# token_urlsafe(16) -> 22 chars, 128 bits of entropy.
CONNECTION_ID_BYTES: int = 16

CORS_ALLOW_ORIGINS: list[str] = get_list("CORS_ALLOW_ORIGINS")

STATIC_DIR: str = get_str("STATIC_DIR", "static")

__all__ = [
    "CONNECTION_ID_BYTES",
    "CORS_ALLOW_ORIGINS",
    "DEFAULT_LANGUAGE",
    "SESSION_ENDPOINT_PATH",
    "SLOT_SWEEP_INTERVAL_S",
    "SLOT_TTL_S",
    "STATIC_DIR",
]
