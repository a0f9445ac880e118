"""HTTP client for the upstream session-creation API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson

from src.errors import UpstreamUnavailable
from src.state.session import UpstreamSession
from src.state.settings import UpstreamSettings

from .payload import build_session_payload

logger = logging.getLogger(__name__)

# Upstream error bodies can be large; keep log lines short.
_ERROR_BODY_PREVIEW_CHARS = 300


def parse_session_response(body: Any) -> UpstreamSession:
    if not isinstance(body, dict):
        raise UpstreamUnavailable("session response must be a JSON object")
    session_id = body.get("id")
    if not isinstance(session_id, str) or not session_id:
        raise UpstreamUnavailable("session response missing 'id'")
    secret = body.get("client_secret")
    value = secret.get("value") if isinstance(secret, dict) else None
    if not isinstance(value, str) or not value:
        raise UpstreamUnavailable("session response missing 'client_secret.value'")
    expires_at = secret.get("expires_at")
    return UpstreamSession(
        session_id=session_id,
        client_secret=value,
        expires_at=expires_at if isinstance(expires_at, int) else None,
    )


class UpstreamSessionClient:
    """Mints transcription sessions with the broker's own API key."""

    def __init__(self, *, http: httpx.AsyncClient, api_key: str, settings: UpstreamSettings) -> None:
        self._http = http
        self._api_key = api_key
        self._settings = settings

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self._settings.api_base}{path}"

    async def create_transcription_session(self, language: str) -> UpstreamSession:
        payload = build_session_payload(self._settings, language)
        logger.info("Creating transcription session with language: %s", language)
        try:
            response = await self._http.post(
                self._url(self._settings.session_path),
                content=orjson.dumps(payload),
                headers=self._headers(),
                timeout=self._settings.http_timeout_s,
            )
        except httpx.HTTPError as exc:
            logger.error("Error sending session creation request: %s", exc)
            raise UpstreamUnavailable(f"request error: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Failed to create session: %s %s",
                response.status_code,
                response.text[:_ERROR_BODY_PREVIEW_CHARS],
            )
            raise UpstreamUnavailable("failed to create session", status_code=response.status_code)

        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            logger.error("Failed to parse session response: %s", exc)
            raise UpstreamUnavailable(f"failed to parse session response: {exc}") from exc

        session = parse_session_response(body)
        logger.info("Session created successfully with ID: %s", session.session_id)
        return session

    async def validate_api_key(self) -> bool:
        try:
            response = await self._http.get(
                self._url(self._settings.models_path),
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._settings.http_timeout_s,
            )
        except httpx.HTTPError as exc:
            logger.error("Error validating API key: %s", exc)
            return False
        if response.status_code != 200:
            logger.error("API key validation failed with status code: %s", response.status_code)
            return False
        return True


__all__ = ["UpstreamSessionClient", "parse_session_response"]
