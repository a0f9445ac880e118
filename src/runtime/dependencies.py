"""Runtime dependency construction (upstream clients, broker, sweeper)."""

from __future__ import annotations

import logging

import httpx

from src.state import RuntimeDeps
from src.state.settings import AppSettings
from src.handlers.connections import ActivePairs
from src.broker import SlotSweeper, SlotRegistry, SessionBroker
from src.upstream import UpstreamConnector, UpstreamSessionClient

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    if not settings.auth.api_key:
        raise RuntimeError("OPENAI_API_KEY is not set in environment variables or .env file")

    http_client = httpx.AsyncClient(timeout=settings.upstream.http_timeout_s)
    try:
        upstream = UpstreamSessionClient(http=http_client, api_key=settings.auth.api_key, settings=settings.upstream)
        if settings.upstream.validate_on_startup:
            logger.info("Starting API key validation...")
            if not await upstream.validate_api_key():
                raise RuntimeError("The provided upstream API key is invalid")
            logger.info("API key validated successfully")
    except BaseException:
        await http_client.aclose()
        raise

    registry = SlotRegistry(ttl_s=settings.broker.slot_ttl_s)
    broker = SessionBroker(upstream=upstream, registry=registry, settings=settings.broker)
    sweeper = SlotSweeper(registry, interval_s=settings.broker.sweep_interval_s)
    sweeper.start()

    return RuntimeDeps(
        settings=settings,
        broker=broker,
        sweeper=sweeper,
        connector=UpstreamConnector(upstream=settings.upstream, relay=settings.relay),
        pairs=ActivePairs(),
        http_client=http_client,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
