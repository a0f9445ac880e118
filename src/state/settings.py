"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str = ""


@dataclass(frozen=True, slots=True)
class TurnDetectionSettings:
    threshold: float = 0.5
    prefix_padding_ms: int = 300
    silence_duration_ms: int = 500


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    api_base: str = "https://api.openai.com/v1"
    session_path: str = "/realtime/transcription_sessions"
    models_path: str = "/models"
    realtime_url: str = "wss://api.openai.com/v1/realtime?intent=transcription"
    beta_header: tuple[str, str] = ("OpenAI-Beta", "realtime=v1")
    transcription_model: str = "gpt-4o-transcribe"
    transcription_prompt: str = ""
    audio_format: str = "pcm16"
    noise_reduction: str | None = "near_field"
    include_logprobs: bool = True
    http_timeout_s: float = 15.0
    open_timeout_s: float = 10.0
    validate_on_startup: bool = True
    turn_detection: TurnDetectionSettings = TurnDetectionSettings()


@dataclass(frozen=True, slots=True)
class BrokerSettings:
    slot_ttl_s: float = 30 * 60
    sweep_interval_s: float = 5 * 60
    connection_id_bytes: int = 16
    default_language: str = "en"


@dataclass(frozen=True, slots=True)
class RelaySettings:
    max_message_bytes: int = 16 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class ServerSettings:
    cors_allow_origins: tuple[str, ...] = ()
    static_dir: str = "static"


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    upstream: UpstreamSettings
    broker: BrokerSettings
    relay: RelaySettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "BrokerSettings",
    "RelaySettings",
    "ServerSettings",
    "TurnDetectionSettings",
    "UpstreamSettings",
]
