"""Close-code classification and reconnect backoff."""

from __future__ import annotations

from dataclasses import dataclass

from src.config.websocket import WS_CLOSE_NORMAL_CODE
from src.errors import TerminalConnectionFailure, TransientConnectionFailure
from src.config.client import (
    TRANSIENT_CLOSE_CODES,
    RECONNECT_MAX_DELAY_S,
    RECONNECT_BASE_DELAY_S,
    RECONNECT_MAX_RETRIES,
    CLOSE_CODE_DESCRIPTIONS,
)


def describe_close_code(code: int | None) -> str:
    if code is None:
        return "Unknown reason"
    return CLOSE_CODE_DESCRIPTIONS.get(code, "Unknown reason")


@dataclass(frozen=True, slots=True)
class ReconnectPolicy:
    """Exponential backoff over an explicit allow-list of transient close codes."""

    base_delay_s: float = RECONNECT_BASE_DELAY_S
    max_delay_s: float = RECONNECT_MAX_DELAY_S
    max_retries: int = RECONNECT_MAX_RETRIES
    transient_codes: frozenset[int] = TRANSIENT_CLOSE_CODES

    def is_transient(self, code: int | None) -> bool:
        return code is not None and code in self.transient_codes

    def classify(
        self, code: int | None, reason: str = ""
    ) -> TransientConnectionFailure | TerminalConnectionFailure | None:
        """None for a normal close; otherwise the failure kind for this code."""
        if code == WS_CLOSE_NORMAL_CODE:
            return None
        if self.is_transient(code):
            return TransientConnectionFailure(code, reason)
        return TerminalConnectionFailure(code, reason or describe_close_code(code))

    def can_retry(self, retry_count: int) -> bool:
        return retry_count < self.max_retries

    def delay_for(self, attempt: int) -> float:
        """Delay before the given 1-based attempt."""
        attempt = max(1, int(attempt))
        return min(self.base_delay_s * (2 ** (attempt - 1)), self.max_delay_s)


__all__ = ["ReconnectPolicy", "describe_close_code"]
