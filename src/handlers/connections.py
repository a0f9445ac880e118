"""Tracking of live relay pairs."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from src.config.websocket import WS_CLOSE_GOING_AWAY_CODE, WS_CLOSE_SHUTDOWN_REASON

if TYPE_CHECKING:
    from src.handlers.websocket.pair import RelayPair

logger = logging.getLogger(__name__)


class ActivePairs:
    def __init__(self) -> None:
        self._active: set[RelayPair] = set()

    def add(self, pair: RelayPair) -> None:
        self._active.add(pair)

    def discard(self, pair: RelayPair) -> None:
        self._active.discard(pair)

    def get_connection_count(self) -> int:
        return len(self._active)

    async def close_all(
        self,
        *,
        code: int = WS_CLOSE_GOING_AWAY_CODE,
        reason: str = WS_CLOSE_SHUTDOWN_REASON,
    ) -> None:
        pairs = list(self._active)
        if not pairs:
            return
        logger.info("closing %s live relay pairs", len(pairs))
        results = await asyncio.gather(*(pair.close(code=code, reason=reason) for pair in pairs), return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning("relay pair close failed: %s", result)


__all__ = ["ActivePairs"]
