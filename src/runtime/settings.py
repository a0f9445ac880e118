"""Load runtime settings.

Configuration values are resolved from the environment in `src/config/*` and
exposed here as structured dataclasses for the rest of the server.
"""

from __future__ import annotations

from src.config.secrets import get_openai_api_key
from src.config.websocket import WS_MAX_MESSAGE_BYTES
from src.state.settings import (
    AppSettings,
    AuthSettings,
    RelaySettings,
    BrokerSettings,
    ServerSettings,
    UpstreamSettings,
    TurnDetectionSettings,
)
from src.config.broker import (
    STATIC_DIR,
    SLOT_TTL_S,
    DEFAULT_LANGUAGE,
    CORS_ALLOW_ORIGINS,
    CONNECTION_ID_BYTES,
    SLOT_SWEEP_INTERVAL_S,
)
from src.config.upstream import (
    VAD_THRESHOLD,
    INCLUDE_LOGPROBS,
    UPSTREAM_API_BASE,
    NOISE_REDUCTION_TYPE,
    UPSTREAM_BETA_HEADER,
    UPSTREAM_MODELS_PATH,
    UPSTREAM_AUDIO_FORMAT,
    UPSTREAM_REALTIME_URL,
    UPSTREAM_SESSION_PATH,
    VAD_PREFIX_PADDING_MS,
    UPSTREAM_HTTP_TIMEOUT_S,
    UPSTREAM_OPEN_TIMEOUT_S,
    VAD_SILENCE_DURATION_MS,
    UPSTREAM_TRANSCRIPTION_MODEL,
    UPSTREAM_VALIDATE_ON_STARTUP,
    UPSTREAM_TRANSCRIPTION_PROMPT,
)


def load_settings() -> AppSettings:
    return AppSettings(
        auth=AuthSettings(api_key=get_openai_api_key()),
        upstream=UpstreamSettings(
            api_base=UPSTREAM_API_BASE,
            session_path=UPSTREAM_SESSION_PATH,
            models_path=UPSTREAM_MODELS_PATH,
            realtime_url=UPSTREAM_REALTIME_URL,
            beta_header=UPSTREAM_BETA_HEADER,
            transcription_model=UPSTREAM_TRANSCRIPTION_MODEL,
            transcription_prompt=UPSTREAM_TRANSCRIPTION_PROMPT,
            audio_format=UPSTREAM_AUDIO_FORMAT,
            noise_reduction=NOISE_REDUCTION_TYPE,
            include_logprobs=INCLUDE_LOGPROBS,
            http_timeout_s=UPSTREAM_HTTP_TIMEOUT_S,
            open_timeout_s=UPSTREAM_OPEN_TIMEOUT_S,
            validate_on_startup=UPSTREAM_VALIDATE_ON_STARTUP,
            turn_detection=TurnDetectionSettings(
                threshold=VAD_THRESHOLD,
                prefix_padding_ms=VAD_PREFIX_PADDING_MS,
                silence_duration_ms=VAD_SILENCE_DURATION_MS,
            ),
        ),
        broker=BrokerSettings(
            slot_ttl_s=SLOT_TTL_S,
            sweep_interval_s=SLOT_SWEEP_INTERVAL_S,
            connection_id_bytes=CONNECTION_ID_BYTES,
            default_language=DEFAULT_LANGUAGE,
        ),
        relay=RelaySettings(max_message_bytes=WS_MAX_MESSAGE_BYTES),
        server=ServerSettings(
            cors_allow_origins=tuple(CORS_ALLOW_ORIGINS),
            static_dir=STATIC_DIR,
        ),
    )


__all__ = ["load_settings"]
