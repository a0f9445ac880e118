"""Upstream transcription service configuration (env-resolved constants only)."""

from __future__ import annotations

from .env import get_str, get_bool, get_float, get_int

UPSTREAM_API_BASE: str = get_str("UPSTREAM_API_BASE", "https://api.openai.com/v1").rstrip("/")

# REST path that mints a transcription session and its ephemeral client secret.
UPSTREAM_SESSION_PATH: str = "/realtime/transcription_sessions"

# Used only for the optional startup key check.
UPSTREAM_MODELS_PATH: str = "/models"

UPSTREAM_REALTIME_URL: str = get_str(
    "UPSTREAM_REALTIME_URL",
    "wss://api.openai.com/v1/realtime?intent=transcription",
)

UPSTREAM_BETA_HEADER: tuple[str, str] = ("OpenAI-Beta", "realtime=v1")

UPSTREAM_TRANSCRIPTION_MODEL: str = get_str("UPSTREAM_TRANSCRIPTION_MODEL", "gpt-4o-transcribe")
UPSTREAM_TRANSCRIPTION_PROMPT: str = (get_str("UPSTREAM_TRANSCRIPTION_PROMPT", "")).strip()

UPSTREAM_HTTP_TIMEOUT_S: float = max(1.0, get_float("UPSTREAM_HTTP_TIMEOUT_S", 15.0))
UPSTREAM_OPEN_TIMEOUT_S: float = max(1.0, get_float("UPSTREAM_OPEN_TIMEOUT_S", 10.0))
UPSTREAM_VALIDATE_ON_STARTUP: bool = get_bool("UPSTREAM_VALIDATE_ON_STARTUP", True)

# Audio format accepted by the upstream session.
UPSTREAM_AUDIO_FORMAT: str = "pcm16"

# Server-side VAD turn detection.
VAD_THRESHOLD: float = get_float("VAD_THRESHOLD", 0.5)
if VAD_THRESHOLD < 0.0 or VAD_THRESHOLD > 1.0:
    VAD_THRESHOLD = 0.5
VAD_PREFIX_PADDING_MS: int = max(0, get_int("VAD_PREFIX_PADDING_MS", 300))
VAD_SILENCE_DURATION_MS: int = max(0, get_int("VAD_SILENCE_DURATION_MS", 500))

# "near_field", "far_field", or "none" to disable.
_NOISE_REDUCTION_RAW = get_str("NOISE_REDUCTION_TYPE", "near_field").lower()
NOISE_REDUCTION_TYPE: str | None = None if _NOISE_REDUCTION_RAW in {"none", "off", "disabled"} else _NOISE_REDUCTION_RAW

INCLUDE_LOGPROBS: bool = get_bool("INCLUDE_LOGPROBS", True)

__all__ = [
    "INCLUDE_LOGPROBS",
    "NOISE_REDUCTION_TYPE",
    "UPSTREAM_API_BASE",
    "UPSTREAM_AUDIO_FORMAT",
    "UPSTREAM_BETA_HEADER",
    "UPSTREAM_HTTP_TIMEOUT_S",
    "UPSTREAM_MODELS_PATH",
    "UPSTREAM_OPEN_TIMEOUT_S",
    "UPSTREAM_REALTIME_URL",
    "UPSTREAM_SESSION_PATH",
    "UPSTREAM_TRANSCRIPTION_MODEL",
    "UPSTREAM_TRANSCRIPTION_PROMPT",
    "UPSTREAM_VALIDATE_ON_STARTUP",
    "VAD_PREFIX_PADDING_MS",
    "VAD_SILENCE_DURATION_MS",
    "VAD_THRESHOLD",
]
