from __future__ import annotations

import httpx
import orjson
import pytest

from src.errors import UpstreamUnavailable
from src.state.settings import UpstreamSettings
from src.upstream.payload import build_session_payload
from src.upstream.sessions import UpstreamSessionClient

SESSION_BODY = {
    "id": "sess_1",
    "object": "realtime.transcription_session",
    "client_secret": {"value": "ek_secret", "expires_at": 1700000000},
}


def _client(handler, settings: UpstreamSettings | None = None) -> tuple[UpstreamSessionClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return UpstreamSessionClient(http=http, api_key="sk-test", settings=settings or UpstreamSettings()), http


@pytest.mark.asyncio
async def test_create_transcription_session_posts_session_config() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SESSION_BODY)

    client, http = _client(handler)
    session = await client.create_transcription_session("pt-BR")
    await http.aclose()

    assert session.session_id == "sess_1"
    assert session.client_secret == "ek_secret"
    assert session.expires_at == 1700000000

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.openai.com/v1/realtime/transcription_sessions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = orjson.loads(request.content)
    assert body["input_audio_format"] == "pcm16"
    assert body["input_audio_transcription"]["language"] == "pt-BR"
    assert body["input_audio_transcription"]["model"] == "gpt-4o-transcribe"
    assert body["turn_detection"] == {
        "type": "server_vad",
        "threshold": 0.5,
        "prefix_padding_ms": 300,
        "silence_duration_ms": 500,
    }
    assert body["input_audio_noise_reduction"] == {"type": "near_field"}
    assert body["include"] == ["item.input_audio_transcription.logprobs"]


@pytest.mark.asyncio
async def test_non_success_status_is_upstream_unavailable() -> None:
    client, http = _client(lambda request: httpx.Response(401, json={"error": {"message": "bad key"}}))
    with pytest.raises(UpstreamUnavailable) as exc:
        await client.create_transcription_session("en")
    await http.aclose()
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_missing_client_secret_is_upstream_unavailable() -> None:
    client, http = _client(lambda request: httpx.Response(200, json={"id": "sess_1"}))
    with pytest.raises(UpstreamUnavailable):
        await client.create_transcription_session("en")
    await http.aclose()


@pytest.mark.asyncio
async def test_transport_error_is_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http = _client(handler)
    with pytest.raises(UpstreamUnavailable):
        await client.create_transcription_session("en")
    await http.aclose()


@pytest.mark.asyncio
async def test_validate_api_key_checks_models_endpoint() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/models"
        ok = request.headers["Authorization"] == "Bearer sk-test"
        return httpx.Response(200 if ok else 401, json={"data": []})

    client, http = _client(handler)
    assert await client.validate_api_key() is True
    await http.aclose()

    client, http = _client(lambda request: httpx.Response(401))
    assert await client.validate_api_key() is False
    await http.aclose()


def test_payload_omits_disabled_options() -> None:
    payload = build_session_payload(UpstreamSettings(noise_reduction=None, include_logprobs=False), "en")
    assert "input_audio_noise_reduction" not in payload
    assert "include" not in payload
