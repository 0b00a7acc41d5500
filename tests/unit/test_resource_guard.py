from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from record_ingest.services.resource_guard import ResourceGuard


def test_handles_closed_on_normal_exit():
    a, b = MagicMock(), MagicMock()
    with ResourceGuard() as guard:
        assert guard.acquire("a", a) is a
        guard.acquire("b", b)
    a.close.assert_called_once()
    b.close.assert_called_once()
    assert guard.closed == ["b", "a"]


def test_handles_closed_when_body_raises():
    a = MagicMock()
    with pytest.raises(RuntimeError):
        with ResourceGuard() as guard:
            guard.acquire("a", a)
            raise RuntimeError("boom")
    a.close.assert_called_once()


def test_close_failure_does_not_stop_other_closes(caplog):
    a, b, c = MagicMock(), MagicMock(), MagicMock()
    b.close.side_effect = OSError("cannot close")
    with caplog.at_level(logging.WARNING):
        with ResourceGuard() as guard:
            guard.acquire("a", a)
            guard.acquire("b", b)
            guard.acquire("c", c)
    a.close.assert_called_once()
    c.close.assert_called_once()
    assert guard.close_failures == ["b"]
    assert "error closing b" in caplog.text


def test_close_all_is_idempotent():
    a = MagicMock()
    guard = ResourceGuard()
    guard.acquire("a", a)
    guard.close_all()
    guard.close_all()
    a.close.assert_called_once()
