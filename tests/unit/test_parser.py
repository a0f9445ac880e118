from __future__ import annotations

import pytest

from src.client.parser import parse_server_event


def test_parse_server_event_normalizes_type() -> None:
    event = parse_server_event('{"type": " session.created ", "session": {"id": "sess_1"}}')
    assert event["type"] == "session.created"
    assert event["session"] == {"id": "sess_1"}


def test_parse_server_event_accepts_bytes() -> None:
    assert parse_server_event(b'{"type": "rate_limits.updated"}')["type"] == "rate_limits.updated"


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        '{"delta": "Hel"}',
        '{"type": ""}',
        '{"type": 5}',
    ],
)
def test_parse_server_event_rejects_malformed_messages(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_server_event(raw)
