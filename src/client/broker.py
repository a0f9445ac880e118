"""HTTP client for the relay server's session endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson

from src.state.session import BrokerSession
from src.config.broker import SESSION_ENDPOINT_PATH
from src.config.client import BROKER_HTTP_TIMEOUT_S
from src.errors import InvalidRequest, UpstreamUnavailable

logger = logging.getLogger(__name__)


class BrokerClient:
    def __init__(
        self,
        server_url: str,
        *,
        http: httpx.AsyncClient | None = None,
        timeout_s: float = BROKER_HTTP_TIMEOUT_S,
    ) -> None:
        self._url = f"{server_url.rstrip('/')}{SESSION_ENDPOINT_PATH}"
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout_s)

    async def request_session(self, language: str) -> BrokerSession:
        try:
            response = await self._http.post(
                self._url,
                content=orjson.dumps({"language": language}),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"Session request failed: {exc}") from exc

        body = _decode(response.content)
        error = body.get("error") if isinstance(body.get("error"), str) else None
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise InvalidRequest(error or "Session request rejected")
        if not response.is_success:
            raise UpstreamUnavailable(error or "Session creation failed", status_code=response.status_code)

        session_id = body.get("sessionId")
        relay_address = body.get("relayAddress")
        if not isinstance(session_id, str) or not isinstance(relay_address, str) or not relay_address:
            raise UpstreamUnavailable("Session response is missing sessionId/relayAddress")

        logger.info("Session created: %s", session_id)
        return BrokerSession(session_id=session_id, relay_address=relay_address)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()


def _decode(content: bytes) -> dict[str, Any]:
    try:
        body = orjson.loads(content) if content else {}
    except orjson.JSONDecodeError:
        logger.warning("session response is not JSON")
        return {}
    return body if isinstance(body, dict) else {}


__all__ = ["BrokerClient"]
