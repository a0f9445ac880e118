"""Client session manager: broker request, relay connect, audio send, reconnect."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

import numpy as np
import orjson
from websockets.asyncio.client import connect
from websockets.exceptions import InvalidURI, InvalidHandshake, ConnectionClosed

from src.state.close import CloseInfo
from src.audio.pcm import pcm16_to_base64
from src.state.client import ClientSessionState
from src.config.broker import DEFAULT_LANGUAGE
from src.config.websocket import WS_CLOSE_NORMAL_CODE, WS_MAX_MESSAGE_BYTES, WS_CLOSE_ABNORMAL_CODE
from src.config.client import EVENT_ID_PREFIX, CONNECT_TIMEOUT_S
from src.errors import (
    InvalidRequest,
    UpstreamUnavailable,
    TerminalConnectionFailure,
    TransientConnectionFailure,
)
from src.handlers.websocket.frames import close_info_from_exception

from .broker import BrokerClient
from .parser import parse_server_event
from .dispatch import dispatch_event
from .reconnect import ReconnectPolicy, describe_close_code

logger = logging.getLogger(__name__)

ConnectFn = Callable[[str], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[None]]

CONNECT_ERRORS = (InvalidHandshake, InvalidURI, OSError)


async def open_relay_socket(address: str) -> Any:
    # The manager applies its own connect timeout around this call.
    return await connect(address, open_timeout=None, max_size=WS_MAX_MESSAGE_BYTES)


def _noop(*_args: Any) -> None:
    return None


class ClientSessionManager:
    """Owns one relay session for one capture source.

    Transient closes are retried with exponential backoff; only terminal
    failures (non-transient close, exhausted retries, broker errors) reach
    `on_error`. Status text goes to `on_status` throughout.
    """

    def __init__(
        self,
        broker: BrokerClient,
        *,
        language: str = DEFAULT_LANGUAGE,
        policy: ReconnectPolicy | None = None,
        connect: ConnectFn = open_relay_socket,
        sleep: SleepFn = asyncio.sleep,
        connect_timeout_s: float = CONNECT_TIMEOUT_S,
        on_transcript: Callable[[str], None] | None = None,
        on_status: Callable[[str], None] | None = None,
        on_connection_status: Callable[[bool], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._broker = broker
        self._language = language
        self._policy = policy or ReconnectPolicy()
        self._connect_fn = connect
        self._sleep = sleep
        self._connect_timeout_s = connect_timeout_s

        self._on_transcript = on_transcript or _noop
        self._on_status = on_status or _noop
        self._on_connection_status = on_connection_status or _noop
        self._on_error = on_error or _noop

        self.state = ClientSessionState()
        self._receive_task: asyncio.Task | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._closing = False

    @property
    def connected(self) -> bool:
        return self.state.connected and self.state.socket is not None

    @property
    def reconnect_task(self) -> asyncio.Task | None:
        return self._reconnect_task

    async def initialize(self) -> bool:
        self._closing = False
        self.notify_status("Creating transcription session...")
        if not await self._request_session():
            return False
        self.notify_status("Session created successfully")
        return await self._connect()

    async def send_audio(self, frame: np.ndarray | bytes) -> bool:
        socket = self.state.socket
        if socket is None or not self.state.connected:
            return False

        message = {
            "type": "input_audio_buffer.append",
            "event_id": self._peek_event_id(),
            "audio": pcm16_to_base64(frame),
        }
        try:
            await socket.send(orjson.dumps(message).decode("utf-8"))
        except ConnectionClosed as exc:
            # The receive loop observes the same close and drives reconnect.
            logger.warning("Error sending audio: %s", exc)
            return False
        self.state.event_seq += 1
        return True

    async def disconnect(self) -> None:
        self._closing = True
        for task in (self._reconnect_task, self._receive_task):
            if task is None or task is asyncio.current_task():
                continue
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._reconnect_task = None
        self._receive_task = None

        socket = self.state.socket
        if socket is not None:
            try:
                await socket.close(code=WS_CLOSE_NORMAL_CODE, reason="Client disconnected")
            except Exception:
                logger.warning("Error closing relay socket", exc_info=True)

        was_connected = self.state.connected
        self.state.reset_session()
        if was_connected:
            self._on_connection_status(False)
        self.notify_status("Disconnected")

    def mark_ready(self) -> None:
        self.state.connected = True
        # Only an upstream-confirmed session proves the path works end to end.
        self.state.retry_count = 0
        self.notify_status("Connected and ready")

    def update_transcript(self, text: str) -> None:
        self.state.transcript = text
        self._on_transcript(text)

    def notify_status(self, status: str) -> None:
        self._on_status(status)

    def notify_error(self, message: str) -> None:
        self._on_error(message)

    def _peek_event_id(self) -> str:
        # The sequence advances only once the frame has been sent.
        return f"{EVENT_ID_PREFIX}{self.state.event_seq}"

    async def _request_session(self) -> bool:
        try:
            session = await self._broker.request_session(self._language)
        except (InvalidRequest, UpstreamUnavailable) as exc:
            logger.error("Error creating session: %s", exc)
            self.notify_status("Session creation failed")
            self.notify_error(str(exc))
            return False
        self.state.session_id = session.session_id
        self.state.relay_address = session.relay_address
        self.state.relay_consumed = False
        return True

    async def _connect(self) -> bool:
        self.notify_status("Preparing to connect...")
        if self.state.relay_consumed:
            # Relay slots are single-use; a reconnect needs a fresh one.
            try:
                session = await self._broker.request_session(self._language)
            except (InvalidRequest, UpstreamUnavailable) as exc:
                logger.warning("Session refresh failed: %s", exc)
                self._handle_close(None, CloseInfo(code=WS_CLOSE_ABNORMAL_CODE, reason=str(exc)))
                return False
            self.state.session_id = session.session_id
            self.state.relay_address = session.relay_address
            self.state.relay_consumed = False

        address = self.state.relay_address
        logger.info("Connecting to relay at %s", address)
        try:
            socket = await asyncio.wait_for(self._connect_fn(address), timeout=self._connect_timeout_s)
        except TimeoutError:
            logger.error("WebSocket connection timeout")
            self.notify_status("Connection timeout")
            self._handle_close(None, CloseInfo(code=WS_CLOSE_ABNORMAL_CODE, reason="connect timeout"))
            return False
        except CONNECT_ERRORS as exc:
            logger.error("WebSocket connection error: %s", exc)
            self.notify_status("Connection error")
            self._handle_close(None, CloseInfo(code=WS_CLOSE_ABNORMAL_CODE, reason=str(exc)))
            return False

        if self._closing:
            with contextlib.suppress(Exception):
                await socket.close(code=WS_CLOSE_NORMAL_CODE, reason="Client disconnected")
            return False

        self.state.socket = socket
        self.state.connected = True
        self.state.relay_consumed = True
        self._on_connection_status(True)
        self.notify_status("Connected and ready")
        self._receive_task = asyncio.create_task(self._receive_loop(socket))
        return True

    async def _receive_loop(self, socket: Any) -> None:
        while True:
            try:
                raw = await socket.recv()
            except ConnectionClosed as exc:
                self._handle_close(socket, close_info_from_exception(exc))
                return
            self._handle_message(raw)

    def _handle_message(self, raw: str | bytes) -> None:
        try:
            event = parse_server_event(raw)
        except ValueError as exc:
            logger.warning("Error processing WebSocket message: %s", exc)
            self.notify_error(f"Error processing WebSocket message: {exc}")
            return
        try:
            dispatch_event(self, event)
        except Exception:
            # A failing callback must not end the receive loop; later closes still drive reconnect.
            logger.exception("Error handling %s event", event.get("type"))

    def _handle_close(self, socket: Any, info: CloseInfo) -> None:
        if socket is not None:
            if socket is not self.state.socket:
                return
            self.state.socket = None
            self.state.connected = False
            self._on_connection_status(False)
            description = describe_close_code(info.code)
            logger.info("WebSocket disconnected: %s (code: %s)", description, info.code)
            self.notify_status(f"WebSocket disconnected: {description} (code: {info.code})")

        if self._closing:
            return
        failure = self._policy.classify(info.code, info.reason)
        if isinstance(failure, TransientConnectionFailure):
            logger.info("Transient connection failure: %s", failure)
            self._schedule_reconnect(failure)
        elif failure is not None:
            logger.error("Connection failed: %s", failure)
            self.notify_error(f"Connection failed: {failure}")

    def _schedule_reconnect(self, cause: TransientConnectionFailure) -> None:
        if self.state.reconnecting:
            logger.debug("Reconnection already in progress, skipping")
            return
        self.state.reconnecting = True

        if not self._policy.can_retry(self.state.retry_count):
            attempts = self._policy.max_retries
            logger.warning("Maximum retry attempts (%s) reached, giving up", attempts)
            self.state.reconnecting = False
            self.state.retry_count = 0
            failure = TerminalConnectionFailure(cause.code, f"Connection failed after {attempts} attempts")
            self.notify_status(str(failure.reason))
            self.notify_error(str(failure))
            return

        self.state.retry_count += 1
        delay = self._policy.delay_for(self.state.retry_count)
        logger.info(
            "Attempting to reconnect (try %s/%s) in %.1fs",
            self.state.retry_count,
            self._policy.max_retries,
            delay,
        )
        self.notify_status(
            f"Reconnecting in {delay:g} seconds... (attempt {self.state.retry_count}/{self._policy.max_retries})"
        )
        self._reconnect_task = asyncio.create_task(self._reconnect_after(delay))

    async def _reconnect_after(self, delay: float) -> None:
        await self._sleep(delay)
        if self._closing:
            return
        # Cleared before connecting so a failed attempt can schedule the next one.
        self.state.reconnecting = False
        logger.info("Executing reconnection attempt %s", self.state.retry_count)
        await self._connect()


__all__ = ["CONNECT_ERRORS", "ClientSessionManager", "open_relay_socket"]
