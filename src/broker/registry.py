"""Pending relay slot map owned by the session broker."""

from __future__ import annotations

import time
import logging
from collections.abc import Callable

from src.errors import InvalidSlot
from src.state.slot import RelaySlot

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


class SlotRegistry:
    """Map of connection id -> RelaySlot.

    Every mutation runs on the event loop thread and does its check and its
    write in the same synchronous step, so a claim and a sweep can never
    interleave on one slot.
    """

    def __init__(self, *, ttl_s: float, now_fn: TimeFn | None = None) -> None:
        self.ttl_s = max(0.0, float(ttl_s))
        self._now = now_fn or time.monotonic
        self._slots: dict[str, RelaySlot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._slots

    def get(self, connection_id: str) -> RelaySlot | None:
        return self._slots.get(connection_id)

    def _is_expired(self, slot: RelaySlot, now: float) -> bool:
        return self.ttl_s > 0 and (now - slot.created_at) > self.ttl_s

    def register(self, *, connection_id: str, upstream_session_id: str, credential: str) -> RelaySlot:
        if connection_id in self._slots:
            raise ValueError(f"connection id already registered: {connection_id}")
        slot = RelaySlot(
            connection_id=connection_id,
            upstream_session_id=upstream_session_id,
            credential=credential,
            created_at=self._now(),
        )
        self._slots[connection_id] = slot
        return slot

    def claim(self, connection_id: str) -> RelaySlot:
        slot = self._slots.get(connection_id)
        if slot is None or slot.claimed:
            raise InvalidSlot(connection_id=connection_id)
        if self._is_expired(slot, self._now()):
            del self._slots[connection_id]
            logger.info("relay slot expired before claim connection_id=%s", connection_id)
            raise InvalidSlot(connection_id=connection_id)
        slot.claimed = True
        return slot

    def release(self, connection_id: str) -> bool:
        """Drop a slot; returns False when it was already gone."""
        return self._slots.pop(connection_id, None) is not None

    def sweep(self) -> list[str]:
        """Evict unclaimed slots older than the TTL. Claimed slots are left to their relay."""
        now = self._now()
        expired = [cid for cid, slot in self._slots.items() if not slot.claimed and self._is_expired(slot, now)]
        for connection_id in expired:
            slot = self._slots.pop(connection_id)
            logger.info(
                "Removing expired connection: %s, session: %s",
                connection_id,
                slot.upstream_session_id,
            )
        return expired


__all__ = ["SlotRegistry", "TimeFn"]
