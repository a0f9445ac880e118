"""Opens the upstream realtime WebSocket on behalf of a relay pair."""

from __future__ import annotations

import logging
from typing import Any

from websockets.asyncio.client import connect
from websockets.exceptions import InvalidURI, InvalidHandshake

from src.state.settings import RelaySettings, UpstreamSettings

logger = logging.getLogger(__name__)

# Failures that mean the upstream socket never reached the open state.
UPSTREAM_OPEN_ERRORS: tuple[type[BaseException], ...] = (InvalidHandshake, InvalidURI, OSError, TimeoutError)


class UpstreamConnector:
    def __init__(self, *, upstream: UpstreamSettings, relay: RelaySettings) -> None:
        self._upstream = upstream
        self._relay = relay

    def _ws_options(self, credential: str) -> dict[str, Any]:
        return {
            "additional_headers": [
                ("Authorization", f"Bearer {credential}"),
                self._upstream.beta_header,
            ],
            "open_timeout": self._upstream.open_timeout_s,
            "max_size": self._relay.max_message_bytes,
            # Keepalive pings are answered by the upstream; the relay only forwards data frames.
            "ping_interval": 20,
            "ping_timeout": 20,
        }

    async def open(self, credential: str) -> Any:
        """Connect and complete the handshake; raises one of UPSTREAM_OPEN_ERRORS on failure."""
        logger.info("Creating WebSocket connection to upstream %s", self._upstream.realtime_url)
        ws = await connect(self._upstream.realtime_url, **self._ws_options(credential))
        logger.info("WebSocket connection to upstream opened")
        return ws


__all__ = ["UPSTREAM_OPEN_ERRORS", "UpstreamConnector"]
