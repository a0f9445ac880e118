from __future__ import annotations

import pytest

import src.upstream.realtime as realtime
from src.state.settings import RelaySettings, UpstreamSettings
from src.upstream.realtime import UpstreamConnector


@pytest.mark.asyncio
async def test_open_sends_bearer_credential_and_beta_header(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict]] = []
    sentinel = object()

    async def fake_connect(url: str, **kwargs):
        calls.append((url, kwargs))
        return sentinel

    monkeypatch.setattr(realtime, "connect", fake_connect)
    connector = UpstreamConnector(upstream=UpstreamSettings(), relay=RelaySettings())

    ws = await connector.open("ek_secret")

    assert ws is sentinel
    url, kwargs = calls[0]
    assert url == UpstreamSettings().realtime_url
    assert ("Authorization", "Bearer ek_secret") in kwargs["additional_headers"]
    assert ("OpenAI-Beta", "realtime=v1") in kwargs["additional_headers"]
    assert kwargs["max_size"] == RelaySettings().max_message_bytes


def test_connect_is_the_asyncio_client() -> None:
    # The legacy client has no additional_headers parameter.
    assert realtime.connect.__module__ == "websockets.asyncio.client"
