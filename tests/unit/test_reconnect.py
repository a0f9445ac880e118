from __future__ import annotations

from src.client.reconnect import ReconnectPolicy, describe_close_code
from src.errors import TerminalConnectionFailure, TransientConnectionFailure


def test_backoff_doubles_from_one_second_and_caps_at_ten() -> None:
    policy = ReconnectPolicy()
    assert [policy.delay_for(n) for n in range(1, 7)] == [1.0, 2.0, 4.0, 8.0, 10.0, 10.0]


def test_only_allow_listed_codes_are_transient() -> None:
    policy = ReconnectPolicy()
    for code in (1001, 1006, 1011, 1012, 1013, 1014):
        assert policy.is_transient(code)
    for code in (None, 1000, 1002, 1008, 4000):
        assert not policy.is_transient(code)


def test_retry_budget() -> None:
    policy = ReconnectPolicy(max_retries=3)
    assert policy.can_retry(0)
    assert policy.can_retry(2)
    assert not policy.can_retry(3)


def test_describe_close_code() -> None:
    assert describe_close_code(1006) == "Abnormal closure - server may be unreachable"
    assert describe_close_code(4000) == "Invalid connection id"
    assert describe_close_code(4999) == "Unknown reason"
    assert describe_close_code(None) == "Unknown reason"


def test_classify_separates_normal_transient_and_terminal_closes() -> None:
    policy = ReconnectPolicy()
    assert policy.classify(1000) is None

    transient = policy.classify(1012, "restarting")
    assert isinstance(transient, TransientConnectionFailure)
    assert str(transient) == "restarting (code: 1012)"

    terminal = policy.classify(4000)
    assert isinstance(terminal, TerminalConnectionFailure)
    assert str(terminal) == "Invalid connection id (code: 4000)"
