"""Configuration module exports (env-resolved constants only)."""

from .broker import (
    SLOT_TTL_S,
    SLOT_SWEEP_INTERVAL_S,
)

__all__ = [
    "SLOT_SWEEP_INTERVAL_S",
    "SLOT_TTL_S",
]
