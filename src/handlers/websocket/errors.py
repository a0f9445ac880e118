"""Structured error frames for relay clients."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from src.config.websocket import WS_SERVER_EVENT_ID, WS_ERROR_TYPE_SERVER

from .frames import truncate_reason

logger = logging.getLogger(__name__)


def build_error_event(
    code: str,
    message: str,
    *,
    error_type: str = WS_ERROR_TYPE_SERVER,
    event_id: str = WS_SERVER_EVENT_ID,
) -> dict[str, Any]:
    """Error frame shaped like the upstream's own `error` events."""
    return {
        "type": "error",
        "event_id": event_id,
        "error": {"type": error_type, "code": code, "message": message},
    }


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def send_error(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    error_type: str = WS_ERROR_TYPE_SERVER,
) -> bool:
    event = build_error_event(error_code, message, error_type=error_type)
    return await safe_send_text(ws, orjson.dumps(event).decode("utf-8"))


async def safe_close(ws: WebSocket, *, code: int, reason: str = "") -> bool:
    try:
        await ws.close(code=code, reason=truncate_reason(reason))
    except Exception:
        logger.debug("WebSocket close failed", exc_info=True)
        return False
    return True


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    error_type: str,
    message: str,
    close_code: int,
) -> None:
    # Accept so the client sees our close code instead of a failed handshake.
    try:
        await ws.accept()
    except Exception:
        logger.debug("WebSocket accept failed during reject", exc_info=True)
        return
    await send_error(ws, error_code=error_code, message=message, error_type=error_type)
    await safe_close(ws, code=close_code, reason=message)


__all__ = [
    "build_error_event",
    "reject_connection",
    "safe_close",
    "safe_send_text",
    "send_error",
]
