"""HTTP handler for broker session requests."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import Request
from fastapi.responses import ORJSONResponse

from src.state.runtime import RuntimeDeps
from src.config.websocket import RELAY_PATH
from src.errors import InvalidRequest, UpstreamUnavailable

logger = logging.getLogger(__name__)


def relay_base_for(request: Request) -> str:
    """Same-origin WebSocket base for the relay endpoint."""
    scheme = "wss" if request.url.scheme in {"https", "wss"} else "ws"
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}{RELAY_PATH}"


async def _read_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise InvalidRequest(f"invalid JSON: {exc}") from exc
    if not isinstance(body, dict):
        raise InvalidRequest("request body must be a JSON object")
    return body


async def handle_create_session(request: Request, runtime_deps: RuntimeDeps) -> ORJSONResponse:
    try:
        body = await _read_body(request)
        session = await runtime_deps.broker.create_session(
            body.get("language"),
            relay_base=relay_base_for(request),
        )
    except InvalidRequest as exc:
        logger.warning("Rejected session request: %s", exc)
        return ORJSONResponse({"error": str(exc)}, status_code=400)
    except UpstreamUnavailable as exc:
        logger.error("Error creating session: %s", exc)
        return ORJSONResponse({"error": str(exc)}, status_code=502)

    return ORJSONResponse({"sessionId": session.session_id, "relayAddress": session.relay_address})


__all__ = ["handle_create_session", "relay_base_for"]
