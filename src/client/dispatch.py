"""Dispatch handlers for inbound transcription events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Callable

if TYPE_CHECKING:
    from .session import ClientSessionManager

logger = logging.getLogger(__name__)

HandlerFn = Callable[["ClientSessionManager", dict[str, Any]], None]


def _handle_session_ready(session: ClientSessionManager, event: dict[str, Any]) -> None:
    logger.info("Session created/updated: %s", event.get("type"))
    session.mark_ready()


def _handle_error(session: ClientSessionManager, event: dict[str, Any]) -> None:
    error = event.get("error")
    message = error.get("message") if isinstance(error, dict) else None
    message = message or "Unknown error"
    logger.error("Error from server: %s", error)
    session.notify_status(f"Error: {message}")
    session.notify_error(f"WebSocket error: {message}")


def _handle_delta(session: ClientSessionManager, event: dict[str, Any]) -> None:
    delta = event.get("delta")
    if isinstance(delta, str) and delta:
        session.update_transcript(session.state.transcript + delta)


def _handle_completed(session: ClientSessionManager, event: dict[str, Any]) -> None:
    transcript = event.get("transcript")
    if isinstance(transcript, str):
        session.update_transcript(transcript)


def _status_only(status: str) -> HandlerFn:
    def _handle(session: ClientSessionManager, _event: dict[str, Any]) -> None:
        session.notify_status(status)

    return _handle


def _log_only(session: ClientSessionManager, event: dict[str, Any]) -> None:
    logger.debug("Received %s", event.get("type"))


def handle_unknown(session: ClientSessionManager, event: dict[str, Any]) -> None:
    logger.info("Unhandled message type: %s", event.get("type"))


HANDLERS: dict[str, HandlerFn] = {
    "session.created": _handle_session_ready,
    "session.updated": _handle_session_ready,
    "transcription_session.created": _handle_session_ready,
    "transcription_session.updated": _handle_session_ready,
    "error": _handle_error,
    "conversation.item.input_audio_transcription.delta": _handle_delta,
    "conversation.item.input_audio_transcription.completed": _handle_completed,
    "input_audio_buffer.speech_started": _status_only("Speech detected"),
    "input_audio_buffer.speech_stopped": _status_only("Speech ended, processing..."),
    "input_audio_buffer.committed": _status_only("Audio committed"),
    "input_audio_buffer.cleared": _status_only("Audio buffer cleared"),
    "conversation.created": _log_only,
    "conversation.item.created": _log_only,
    "rate_limits.updated": _log_only,
}


def dispatch_event(session: ClientSessionManager, event: dict[str, Any]) -> None:
    HANDLERS.get(event.get("type", ""), handle_unknown)(session, event)


__all__ = ["HANDLERS", "dispatch_event", "handle_unknown"]
