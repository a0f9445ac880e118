from __future__ import annotations

import asyncio

import pytest

from src.broker.sweeper import SlotSweeper
from src.broker.registry import SlotRegistry


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_sweeper_evicts_expired_slots_in_background() -> None:
    clock = _Clock()
    registry = SlotRegistry(ttl_s=60.0, now_fn=clock)
    registry.register(connection_id="abc", upstream_session_id="sess_1", credential="secret")
    clock.now = 61.0

    sweeper = SlotSweeper(registry, interval_s=0.01)
    sweeper.start()
    assert sweeper.running

    for _ in range(100):
        if len(registry) == 0:
            break
        await asyncio.sleep(0.01)
    assert len(registry) == 0

    await sweeper.stop()
    assert not sweeper.running


@pytest.mark.asyncio
async def test_sweep_once_counts_evictions() -> None:
    clock = _Clock()
    registry = SlotRegistry(ttl_s=60.0, now_fn=clock)
    for cid in ("a", "b"):
        registry.register(connection_id=cid, upstream_session_id=f"sess_{cid}", credential="secret")
    sweeper = SlotSweeper(registry, interval_s=300.0)

    assert sweeper.sweep_once() == 0
    clock.now = 120.0
    assert sweeper.sweep_once() == 2


@pytest.mark.asyncio
async def test_stop_without_start_is_a_noop() -> None:
    sweeper = SlotSweeper(SlotRegistry(ttl_s=60.0), interval_s=300.0)
    await sweeper.stop()
    assert not sweeper.running
