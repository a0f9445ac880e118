"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from src.broker.service import SessionBroker
    from src.broker.sweeper import SlotSweeper
    from src.state.settings import AppSettings
    from src.handlers.connections import ActivePairs
    from src.upstream.realtime import UpstreamConnector


@dataclass(slots=True)
class RuntimeDeps:
    settings: AppSettings
    broker: SessionBroker
    sweeper: SlotSweeper
    connector: UpstreamConnector
    pairs: ActivePairs
    http_client: httpx.AsyncClient | None = None

    async def shutdown(self) -> None:
        try:
            await self.sweeper.stop()
        except Exception:
            logger.exception("slot sweeper shutdown failed")
        try:
            await self.pairs.close_all()
        except Exception:
            logger.exception("relay pair shutdown failed")
        if self.http_client is not None:
            try:
                await self.http_client.aclose()
            except Exception:
                logger.exception("http client shutdown failed")


__all__ = ["RuntimeDeps"]
