"""Inbound server event parsing/validation."""

from __future__ import annotations

from typing import Any

import orjson

EVENT_KEY_TYPE = "type"


def parse_server_event(raw: str | bytes) -> dict[str, Any]:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    msg_type = msg.get(EVENT_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ValueError("message missing non-empty 'type'")

    msg[EVENT_KEY_TYPE] = msg_type.strip()
    return msg


__all__ = ["EVENT_KEY_TYPE", "parse_server_event"]
