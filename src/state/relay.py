"""Relay pair phases."""

from __future__ import annotations

from enum import Enum


class RelayPhase(str, Enum):
    AWAITING_UPSTREAM_OPEN = "awaiting_upstream_open"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


__all__ = ["RelayPhase"]
