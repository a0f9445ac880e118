"""Shared error types for the transcription relay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InvalidRequest(Exception):
    """Malformed caller input; rejected locally without an upstream call."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class UpstreamUnavailable(Exception):
    """The upstream session-creation call did not succeed."""

    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


@dataclass(frozen=True, slots=True)
class InvalidSlot(Exception):
    """Relay claim against an unknown, expired or already-claimed connection id."""

    connection_id: str

    def __str__(self) -> str:
        return f"invalid connection id: {self.connection_id}"


@dataclass(frozen=True, slots=True)
class TransientConnectionFailure(Exception):
    """Close classified as recoverable; handled by the client reconnect loop."""

    code: int
    reason: str = ""

    def __str__(self) -> str:
        return f"{self.reason} (code: {self.code})" if self.reason else f"code: {self.code}"


@dataclass(frozen=True, slots=True)
class TerminalConnectionFailure(Exception):
    """Non-transient close or exhausted reconnect budget."""

    code: int | None
    reason: str = ""

    def __str__(self) -> str:
        return f"{self.reason} (code: {self.code})" if self.code is not None else self.reason


@dataclass(frozen=True, slots=True)
class DeviceUnavailable(Exception):
    """Capture device missing, busy, or permission denied."""

    message: str

    def __str__(self) -> str:
        return self.message


__all__ = [
    "DeviceUnavailable",
    "InvalidRequest",
    "InvalidSlot",
    "TerminalConnectionFailure",
    "TransientConnectionFailure",
    "UpstreamUnavailable",
]
