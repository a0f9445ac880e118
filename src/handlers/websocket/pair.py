"""Duplex relay between one client WebSocket and one upstream WebSocket."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any, Literal

from fastapi import WebSocket
from websockets.exceptions import ConnectionClosed

from src.state.slot import RelaySlot
from src.state.close import CloseInfo
from src.state.relay import RelayPhase
from src.broker.registry import SlotRegistry
from src.upstream.realtime import UPSTREAM_OPEN_ERRORS, UpstreamConnector
from src.config.websocket import (
    WS_ERROR_UPSTREAM_LOST,
    WS_CLOSE_ABNORMAL_CODE,
    WS_CLOSE_NO_STATUS_CODE,
    WS_CLOSE_SERVER_ERROR_CODE,
    WS_ERROR_UPSTREAM_UNAVAILABLE,
)

from .errors import safe_close, send_error
from .frames import describe_frame, derive_close_code, truncate_reason, close_info_from_exception

logger = logging.getLogger(__name__)

Side = Literal["client", "upstream"]


class RelayPair:
    """Forwards frames verbatim in both directions until either side closes.

    Phases: AWAITING_UPSTREAM_OPEN -> OPEN -> CLOSING -> CLOSED. Frames are
    only forwarded while OPEN. Whichever side closes first decides the code
    used to close the other side; the slot is released exactly once.
    """

    def __init__(
        self,
        client: WebSocket,
        slot: RelaySlot,
        *,
        registry: SlotRegistry,
        connector: UpstreamConnector,
    ) -> None:
        self._client = client
        self._slot = slot
        self._registry = registry
        self._connector = connector

        self.phase = RelayPhase.AWAITING_UPSTREAM_OPEN
        self._upstream: Any = None
        self._client_closed = False
        self._upstream_closed = False
        self._released = False
        self._run_task: asyncio.Task | None = None

        self.frames_to_upstream = 0
        self.frames_to_client = 0

    @property
    def connection_id(self) -> str:
        return self._slot.connection_id

    @property
    def session_id(self) -> str:
        return self._slot.upstream_session_id

    async def run(self) -> None:
        self._run_task = asyncio.current_task()
        try:
            if not await self._open_upstream():
                return
            side, info = await self._forward()
            self.phase = RelayPhase.CLOSING
            await self._close_counterpart(side, info)
        finally:
            self.phase = RelayPhase.CLOSING
            await self._close_upstream(WS_CLOSE_SERVER_ERROR_CODE, "relay closed")
            await self._close_client(WS_CLOSE_SERVER_ERROR_CODE, "relay closed")
            self.release()
            self.phase = RelayPhase.CLOSED
            logger.info(
                "relay pair closed connection_id=%s session_id=%s to_upstream=%s to_client=%s",
                self.connection_id,
                self.session_id,
                self.frames_to_upstream,
                self.frames_to_client,
            )

    def release(self) -> bool:
        """Remove the slot from the pending map; later calls are no-ops."""
        if self._released:
            return False
        self._released = True
        removed = self._registry.release(self.connection_id)
        if removed:
            logger.info("Removed connection %s from active connections", self.connection_id)
        return removed

    async def close(self, *, code: int, reason: str) -> None:
        """Close both sides from outside the pair (server shutdown)."""
        if self.phase is RelayPhase.AWAITING_UPSTREAM_OPEN:
            if self._run_task is not None:
                self._run_task.cancel()
            await self._close_client(code, reason)
            return
        # The upstream pump sees the close and run() finishes the client side.
        await self._close_upstream(code, reason)

    async def _open_upstream(self) -> bool:
        try:
            self._upstream = await self._connector.open(self._slot.credential)
        except UPSTREAM_OPEN_ERRORS as exc:
            logger.error(
                "upstream open failed connection_id=%s session_id=%s: %s",
                self.connection_id,
                self.session_id,
                exc,
            )
            await self._reject_upstream_open(exc)
            return False
        except Exception as exc:
            logger.exception(
                "unexpected upstream open failure connection_id=%s session_id=%s",
                self.connection_id,
                self.session_id,
            )
            await self._reject_upstream_open(exc)
            return False
        self.phase = RelayPhase.OPEN
        logger.info("relay pair open connection_id=%s session_id=%s", self.connection_id, self.session_id)
        return True

    async def _reject_upstream_open(self, exc: BaseException) -> None:
        await send_error(
            self._client,
            error_code=WS_ERROR_UPSTREAM_UNAVAILABLE,
            message=f"Server proxy error: {exc}",
        )
        await self._close_client(WS_CLOSE_SERVER_ERROR_CODE, "upstream unavailable")

    async def _forward(self) -> tuple[Side, CloseInfo]:
        client_task = asyncio.create_task(self._pump_client_to_upstream())
        upstream_task = asyncio.create_task(self._pump_upstream_to_client())
        tasks = {client_task, upstream_task}
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise
        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        # If both finished in the same turn, the client's close wins.
        first = client_task if client_task in done else upstream_task
        return first.result()

    async def _pump_client_to_upstream(self) -> tuple[Side, CloseInfo]:
        while True:
            try:
                message = await self._client.receive()
            except Exception as exc:
                self._client_closed = True
                logger.debug("client receive failed connection_id=%s: %s", self.connection_id, exc)
                return "client", CloseInfo(code=WS_CLOSE_ABNORMAL_CODE, reason=str(exc))

            if message.get("type") == "websocket.disconnect":
                self._client_closed = True
                code = message.get("code") or WS_CLOSE_NO_STATUS_CODE
                return "client", CloseInfo(code=int(code), reason=str(message.get("reason") or ""))

            text = message.get("text")
            frame: str | bytes | None = text if text is not None else message.get("bytes")
            if frame is None:
                continue
            if self.phase is not RelayPhase.OPEN:
                logger.debug("dropping client frame outside OPEN phase=%s", self.phase.value)
                continue

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("client -> upstream %s", describe_frame(frame))
            try:
                await self._upstream.send(frame)
            except ConnectionClosed as exc:
                self._upstream_closed = True
                return "upstream", close_info_from_exception(exc)
            self.frames_to_upstream += 1

    async def _pump_upstream_to_client(self) -> tuple[Side, CloseInfo]:
        while True:
            try:
                frame = await self._upstream.recv()
            except ConnectionClosed as exc:
                self._upstream_closed = True
                return "upstream", close_info_from_exception(exc)

            if self.phase is not RelayPhase.OPEN:
                logger.debug("dropping upstream frame outside OPEN phase=%s", self.phase.value)
                continue

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("upstream -> client %s", describe_frame(frame))
            try:
                if isinstance(frame, str):
                    await self._client.send_text(frame)
                else:
                    await self._client.send_bytes(bytes(frame))
            except Exception as exc:
                self._client_closed = True
                logger.debug("client send failed connection_id=%s: %s", self.connection_id, exc)
                return "client", CloseInfo(code=WS_CLOSE_ABNORMAL_CODE, reason="client send failed")
            self.frames_to_client += 1

    async def _close_counterpart(self, side: Side, info: CloseInfo) -> None:
        code = derive_close_code(info.code)
        if side == "client":
            logger.info(
                "Client WebSocket closed for session %s: %s %s",
                self.session_id,
                info.code,
                info.reason,
            )
            await self._close_upstream(code, info.reason)
            return

        logger.info(
            "Upstream WebSocket closed for session %s: %s %s",
            self.session_id,
            info.code,
            info.reason,
        )
        if info.code == WS_CLOSE_ABNORMAL_CODE and not self._client_closed:
            await send_error(
                self._client,
                error_code=WS_ERROR_UPSTREAM_LOST,
                message="Server proxy error: upstream connection lost",
            )
        await self._close_client(code, info.reason)

    async def _close_upstream(self, code: int, reason: str) -> None:
        if self._upstream is None or self._upstream_closed:
            return
        self._upstream_closed = True
        try:
            await self._upstream.close(code=code, reason=truncate_reason(reason))
        except Exception:
            logger.debug("upstream close failed connection_id=%s", self.connection_id, exc_info=True)

    async def _close_client(self, code: int, reason: str) -> None:
        if self._client_closed:
            return
        self._client_closed = True
        await safe_close(self._client, code=code, reason=reason)


__all__ = ["RelayPair"]
