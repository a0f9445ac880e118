"""Background eviction of unclaimed relay slots."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from .registry import SlotRegistry

logger = logging.getLogger(__name__)


class SlotSweeper:
    def __init__(self, registry: SlotRegistry, *, interval_s: float) -> None:
        self._registry = registry
        self._interval_s = max(0.001, float(interval_s))
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def sweep_once(self) -> int:
        evicted = self._registry.sweep()
        if evicted:
            logger.info("Cleaned up %s expired connections", len(evicted))
        return len(evicted)

    async def _sweep_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._interval_s)
                if self._stop_event.is_set():
                    break
                try:
                    self.sweep_once()
                except Exception:
                    logger.exception("relay slot sweep failed")
        except asyncio.CancelledError:
            return


__all__ = ["SlotSweeper"]
