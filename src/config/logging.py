"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# httpx and websockets log every request/frame at INFO/DEBUG.
SHOW_HTTP_LOGS: bool = (os.getenv("SHOW_HTTP_LOGS") or "").strip().lower() in {"1", "true", "yes"}

# Longest text-frame excerpt written to debug logs.
LOG_FRAME_PREVIEW_CHARS: int = 100

__all__ = ["LOG_FORMAT", "LOG_FRAME_PREVIEW_CHARS", "LOG_LEVEL", "SHOW_HTTP_LOGS"]
