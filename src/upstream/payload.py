"""Request body for minting an upstream transcription session."""

from __future__ import annotations

from typing import Any

from src.state.settings import UpstreamSettings


def build_session_payload(settings: UpstreamSettings, language: str) -> dict[str, Any]:
    turn = settings.turn_detection
    payload: dict[str, Any] = {
        "input_audio_format": settings.audio_format,
        "input_audio_transcription": {
            "model": settings.transcription_model,
            "language": language,
            "prompt": settings.transcription_prompt,
        },
        "turn_detection": {
            "type": "server_vad",
            "threshold": turn.threshold,
            "prefix_padding_ms": turn.prefix_padding_ms,
            "silence_duration_ms": turn.silence_duration_ms,
        },
    }
    if settings.noise_reduction:
        payload["input_audio_noise_reduction"] = {"type": settings.noise_reduction}
    if settings.include_logprobs:
        payload["include"] = ["item.input_audio_transcription.logprobs"]
    return payload


__all__ = ["build_session_payload"]
