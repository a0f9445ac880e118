"""Close event record shared by the relay and the client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CloseInfo:
    code: int
    reason: str = ""


__all__ = ["CloseInfo"]
