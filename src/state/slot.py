"""Pending relay slot record."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class RelaySlot:
    connection_id: str
    upstream_session_id: str
    credential: str = field(repr=False)
    created_at: float
    claimed: bool = False


__all__ = ["RelaySlot"]
