"""Session broker: mints upstream sessions and hands out relay addresses."""

from __future__ import annotations

import re
import logging
import secrets
from typing import Any

from src.state.session import BrokerSession
from src.errors import InvalidRequest
from src.state.settings import BrokerSettings
from src.upstream.sessions import UpstreamSessionClient

from .registry import SlotRegistry

logger = logging.getLogger(__name__)

# ISO 639 primary tag with optional subtags ("en", "pt-BR", "zh-Hant").
_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2,3}(?:-[A-Za-z0-9]{2,8})*$")


def normalize_language(language: Any, *, default: str) -> str:
    if language is None:
        return default
    if not isinstance(language, str):
        raise InvalidRequest("language must be a string")
    language = language.strip()
    if not language:
        return default
    if not _LANGUAGE_RE.match(language):
        raise InvalidRequest(f"invalid language tag: {language!r}")
    return language


class SessionBroker:
    def __init__(
        self,
        *,
        upstream: UpstreamSessionClient,
        registry: SlotRegistry,
        settings: BrokerSettings,
    ) -> None:
        self._upstream = upstream
        self._registry = registry
        self._settings = settings

    @property
    def registry(self) -> SlotRegistry:
        return self._registry

    def _new_connection_id(self) -> str:
        while True:
            connection_id = secrets.token_urlsafe(self._settings.connection_id_bytes)
            if connection_id not in self._registry:
                return connection_id

    async def create_session(self, language: Any, *, relay_base: str) -> BrokerSession:
        """Mint an upstream session and register its relay slot.

        Raises InvalidRequest before any upstream call when `language` is
        malformed, and UpstreamUnavailable (with no slot registered) when the
        upstream refuses. The credential stays in the registry; only the
        session id and the relay address go back to the caller.
        """
        language = normalize_language(language, default=self._settings.default_language)
        upstream_session = await self._upstream.create_transcription_session(language)

        connection_id = self._new_connection_id()
        self._registry.register(
            connection_id=connection_id,
            upstream_session_id=upstream_session.session_id,
            credential=upstream_session.client_secret,
        )
        relay_address = f"{relay_base.rstrip('/')}/{connection_id}"
        logger.info(
            "relay slot registered connection_id=%s session_id=%s pending=%s",
            connection_id,
            upstream_session.session_id,
            len(self._registry),
        )
        return BrokerSession(session_id=upstream_session.session_id, relay_address=relay_address)


__all__ = ["SessionBroker", "normalize_language"]
