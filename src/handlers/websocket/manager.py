"""Relay WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from src.errors import InvalidSlot
from src.state.runtime import RuntimeDeps
from src.config.websocket import (
    WS_ERROR_INVALID_SLOT,
    WS_CLOSE_INVALID_SLOT_CODE,
    WS_CLOSE_INVALID_SLOT_REASON,
    WS_ERROR_TYPE_INVALID_REQUEST,
)

from .pair import RelayPair
from .errors import reject_connection

logger = logging.getLogger(__name__)


async def handle_relay_connection(ws: WebSocket, connection_id: str, runtime_deps: RuntimeDeps) -> None:
    logger.info("WebSocket connection attempt for connection ID: %s", connection_id)
    registry = runtime_deps.broker.registry
    try:
        slot = registry.claim(connection_id)
    except InvalidSlot:
        logger.error("Invalid connection ID: %s", connection_id)
        await reject_connection(
            ws,
            error_code=WS_ERROR_INVALID_SLOT,
            error_type=WS_ERROR_TYPE_INVALID_REQUEST,
            message=WS_CLOSE_INVALID_SLOT_REASON,
            close_code=WS_CLOSE_INVALID_SLOT_CODE,
        )
        return

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            registry.release(connection_id)
        raise

    pair = RelayPair(ws, slot, registry=registry, connector=runtime_deps.connector)
    runtime_deps.pairs.add(pair)
    logger.info(
        "WebSocket connection established for session: %s. Active: %s",
        slot.upstream_session_id,
        runtime_deps.pairs.get_connection_count(),
    )
    try:
        await pair.run()
    finally:
        runtime_deps.pairs.discard(pair)
        logger.info(
            "WebSocket connection closed session_id=%s. Active: %s",
            slot.upstream_session_id,
            runtime_deps.pairs.get_connection_count(),
        )


__all__ = ["handle_relay_connection"]
