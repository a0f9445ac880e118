"""Frame and close-code helpers for the relay."""

from __future__ import annotations

import logging

import orjson
from websockets.exceptions import ConnectionClosed

from src.state.close import CloseInfo
from src.config.logging import LOG_FRAME_PREVIEW_CHARS
from src.config.websocket import (
    WS_CLOSE_NORMAL_CODE,
    WS_CLOSE_ABNORMAL_CODE,
    WS_CLOSE_NO_STATUS_CODE,
    WS_RESERVED_CLOSE_CODES,
    WS_MAX_CLOSE_REASON_BYTES,
    WS_CLOSE_SERVER_ERROR_CODE,
)

logger = logging.getLogger(__name__)


def derive_close_code(code: int | None) -> int:
    """Map a close code seen on one side to one that may be sent on the other.

    1005/1006/1015 are reported locally but cannot appear in a close frame.
    A peer that left without a status is treated as a normal close; one that
    vanished abnormally becomes a server error so the far side can retry.
    """
    if code is None or code == WS_CLOSE_NO_STATUS_CODE:
        return WS_CLOSE_NORMAL_CODE
    if code in WS_RESERVED_CLOSE_CODES:
        return WS_CLOSE_SERVER_ERROR_CODE
    if 1000 <= code <= 1014 or 3000 <= code <= 4999:
        return code
    return WS_CLOSE_SERVER_ERROR_CODE


def truncate_reason(reason: str | None) -> str:
    encoded = (reason or "").encode("utf-8")
    if len(encoded) <= WS_MAX_CLOSE_REASON_BYTES:
        return reason or ""
    return encoded[:WS_MAX_CLOSE_REASON_BYTES].decode("utf-8", errors="ignore")


def close_info_from_exception(exc: ConnectionClosed) -> CloseInfo:
    if exc.rcvd is not None:
        return CloseInfo(code=exc.rcvd.code, reason=exc.rcvd.reason)
    if exc.sent is not None:
        return CloseInfo(code=exc.sent.code, reason=exc.sent.reason)
    return CloseInfo(code=WS_CLOSE_ABNORMAL_CODE)


def describe_frame(frame: str | bytes) -> str:
    """Short log description of a frame; never used for forwarding."""
    if isinstance(frame, bytes | bytearray):
        return f"binary message, size: {len(frame)} bytes"
    preview = frame[:LOG_FRAME_PREVIEW_CHARS]
    suffix = "..." if len(frame) > LOG_FRAME_PREVIEW_CHARS else ""
    event_type = None
    if frame.startswith("{"):
        try:
            parsed = orjson.loads(frame)
        except orjson.JSONDecodeError as exc:
            logger.debug("Error parsing message as JSON: %s", exc)
        else:
            if isinstance(parsed, dict):
                event_type = parsed.get("type")
    if event_type:
        return f"text message type={event_type}: {preview}{suffix}"
    return f"text message: {preview}{suffix}"


__all__ = ["close_info_from_exception", "derive_close_code", "describe_frame", "truncate_reason"]
