"""WebSocket relay configuration and constants."""

from __future__ import annotations

from .env import get_int

RELAY_PATH = "/ws/relay"
WS_ENDPOINT_PATH = RELAY_PATH + "/{connection_id}"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_GOING_AWAY_CODE = 1001
WS_CLOSE_NO_STATUS_CODE = 1005
WS_CLOSE_ABNORMAL_CODE = 1006
WS_CLOSE_SERVER_ERROR_CODE = 1011
WS_CLOSE_TLS_FAILURE_CODE = 1015
WS_CLOSE_INVALID_SLOT_CODE = 4000

WS_CLOSE_INVALID_SLOT_REASON = "Invalid connection id"
WS_CLOSE_SHUTDOWN_REASON = "server shutting down"

# Codes a peer may report but never put on the wire in a close frame.
WS_RESERVED_CLOSE_CODES = frozenset({1004, WS_CLOSE_NO_STATUS_CODE, WS_CLOSE_ABNORMAL_CODE, WS_CLOSE_TLS_FAILURE_CODE})

# Close frame reasons are limited to 123 bytes.
WS_MAX_CLOSE_REASON_BYTES = 123

WS_MAX_MESSAGE_BYTES: int = max(1024, get_int("WS_MAX_MESSAGE_BYTES", 16 * 1024 * 1024))

# Errors (error.code values)
WS_ERROR_INVALID_SLOT = "invalid_slot"
WS_ERROR_UPSTREAM_UNAVAILABLE = "upstream_unavailable"
WS_ERROR_UPSTREAM_LOST = "upstream_connection_lost"

# error.type values, matching the upstream error envelope.
WS_ERROR_TYPE_SERVER = "server_error"
WS_ERROR_TYPE_INVALID_REQUEST = "invalid_request_error"
WS_SERVER_EVENT_ID = "server_error"

__all__ = [
    "RELAY_PATH",
    "WS_ENDPOINT_PATH",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_GOING_AWAY_CODE",
    "WS_CLOSE_NO_STATUS_CODE",
    "WS_CLOSE_ABNORMAL_CODE",
    "WS_CLOSE_SERVER_ERROR_CODE",
    "WS_CLOSE_TLS_FAILURE_CODE",
    "WS_CLOSE_INVALID_SLOT_CODE",
    "WS_CLOSE_INVALID_SLOT_REASON",
    "WS_CLOSE_SHUTDOWN_REASON",
    "WS_RESERVED_CLOSE_CODES",
    "WS_MAX_CLOSE_REASON_BYTES",
    "WS_MAX_MESSAGE_BYTES",
    "WS_ERROR_INVALID_SLOT",
    "WS_ERROR_UPSTREAM_UNAVAILABLE",
    "WS_ERROR_UPSTREAM_LOST",
    "WS_ERROR_TYPE_SERVER",
    "WS_ERROR_TYPE_INVALID_REQUEST",
    "WS_SERVER_EVENT_ID",
]
