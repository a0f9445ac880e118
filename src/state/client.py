"""Per-tab client session state."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass


@dataclass(slots=True)
class ClientSessionState:
    session_id: str = ""
    relay_address: str = ""
    socket: Any = None
    connected: bool = False
    transcript: str = ""
    event_seq: int = 0
    retry_count: int = 0
    reconnecting: bool = False
    # The relay slot behind relay_address is single-use; once a connection
    # opened on it, a reconnect needs a fresh one from the broker.
    relay_consumed: bool = False

    def reset_session(self) -> None:
        self.session_id = ""
        self.relay_address = ""
        self.socket = None
        self.connected = False
        self.transcript = ""
        self.retry_count = 0
        self.reconnecting = False
        self.relay_consumed = False


__all__ = ["ClientSessionState"]
