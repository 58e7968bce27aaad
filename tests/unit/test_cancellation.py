"""Tests for CancelToken."""

from __future__ import annotations

import threading

import pytest

from structurizr_client.cancellation import CancelToken
from structurizr_client.exceptions import OperationCancelledError


class _Clock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_no_deadline():
    token = CancelToken()

    assert token.deadline is None
    assert token.remaining() is None
    assert not token.expired
    token.raise_if_cancelled()


def test_deadline_counts_down():
    clock = _Clock()
    token = CancelToken(timeout=5.0, clock=clock)

    assert token.remaining() == 5.0
    clock.now = 103.0
    assert token.remaining() == 2.0
    clock.now = 110.0
    assert token.remaining() == 0.0
    assert token.expired

    with pytest.raises(OperationCancelledError, match="push deadline exceeded") as exc_info:
        token.raise_if_cancelled("push")
    assert exc_info.value.context == {"reason": "deadline"}


def test_cancel_runs_callbacks_once():
    token = CancelToken()
    calls = []
    token.on_cancel(lambda: calls.append("closed"))

    token.cancel()
    token.cancel()

    assert calls == ["closed"]
    assert token.cancelled
    with pytest.raises(OperationCancelledError, match="cancelled"):
        token.raise_if_cancelled()


def test_unregistered_callback_not_run():
    token = CancelToken()
    calls = []
    unregister = token.on_cancel(lambda: calls.append("closed"))

    unregister()
    token.cancel()

    assert calls == []


def test_callback_registered_after_cancel_runs_immediately():
    token = CancelToken()
    token.cancel()
    calls = []

    token.on_cancel(lambda: calls.append("closed"))

    assert calls == ["closed"]


def test_failing_callback_does_not_stop_others():
    token = CancelToken()
    calls = []

    def boom():
        raise RuntimeError("already closed")

    token.on_cancel(boom)
    token.on_cancel(lambda: calls.append("second"))
    token.cancel()

    assert calls == ["second"]


def test_cancel_from_another_thread():
    token = CancelToken()
    fired = threading.Event()
    token.on_cancel(fired.set)

    thread = threading.Thread(target=token.cancel)
    thread.start()
    thread.join()

    assert fired.is_set()
    assert token.cancelled
