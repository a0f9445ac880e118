"""Client-side session and audio constants."""

from __future__ import annotations

# Connection supervision
CONNECT_TIMEOUT_S: float = 10.0
RECONNECT_BASE_DELAY_S: float = 1.0
RECONNECT_MAX_DELAY_S: float = 10.0
RECONNECT_MAX_RETRIES: int = 3

# Close codes that are worth another attempt: going away, abnormal closure,
# server error, service restart, try again later, bad gateway.
TRANSIENT_CLOSE_CODES: frozenset[int] = frozenset({1001, 1006, 1011, 1012, 1013, 1014})

CLOSE_CODE_DESCRIPTIONS: dict[int, str] = {
    1000: "Normal closure",
    1001: "Endpoint going away",
    1006: "Abnormal closure - server may be unreachable",
    1011: "Server error occurred",
    1012: "Server restarting",
    1013: "Try again later",
    1014: "Bad gateway",
    4000: "Invalid connection id",
}

# Event ids on outbound control messages: event_0, event_1, ...
EVENT_ID_PREFIX: str = "event_"

# Capture: mono PCM16 at 24kHz (required by the upstream pcm16 input format).
AUDIO_SAMPLE_RATE_HZ: int = 24000
AUDIO_CHANNELS: int = 1
AUDIO_FRAME_SAMPLES: int = 4096
# Frames waiting for a slow consumer; the oldest is dropped past this.
AUDIO_MAX_QUEUED_FRAMES: int = 64

# Volume meter
VOLUME_REFRESH_HZ: float = 60.0
VOLUME_FFT_SIZE: int = 256
VOLUME_SMOOTHING: float = 0.8
VOLUME_MIN_DB: float = -100.0
VOLUME_MAX_DB: float = -30.0
VOLUME_GAIN: float = 2.0

BROKER_HTTP_TIMEOUT_S: float = 15.0

__all__ = [
    "AUDIO_CHANNELS",
    "AUDIO_FRAME_SAMPLES",
    "AUDIO_MAX_QUEUED_FRAMES",
    "AUDIO_SAMPLE_RATE_HZ",
    "BROKER_HTTP_TIMEOUT_S",
    "CLOSE_CODE_DESCRIPTIONS",
    "CONNECT_TIMEOUT_S",
    "EVENT_ID_PREFIX",
    "RECONNECT_BASE_DELAY_S",
    "RECONNECT_MAX_DELAY_S",
    "RECONNECT_MAX_RETRIES",
    "TRANSIENT_CLOSE_CODES",
    "VOLUME_FFT_SIZE",
    "VOLUME_GAIN",
    "VOLUME_MAX_DB",
    "VOLUME_MIN_DB",
    "VOLUME_REFRESH_HZ",
    "VOLUME_SMOOTHING",
]
