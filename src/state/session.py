"""Session handles returned by the upstream service and by the broker."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UpstreamSession:
    session_id: str
    client_secret: str = field(repr=False)
    expires_at: int | None = None


@dataclass(frozen=True, slots=True)
class BrokerSession:
    session_id: str
    relay_address: str


__all__ = ["BrokerSession", "UpstreamSession"]
