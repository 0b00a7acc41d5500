from __future__ import annotations

import io
import logging
from unittest.mock import MagicMock

from record_ingest.logging.rejection_sink import RejectionSink
from record_ingest.models.rejection import Rejection, RejectionReason


def _rej(n: int, text: str = "x", reason: RejectionReason = RejectionReason.EMPTY_NAME) -> Rejection:
    return Rejection(line_number=n, raw_text=text, reason=reason, detail="d")


def test_header_written_on_open():
    buf = io.StringIO()
    RejectionSink(buf)
    assert buf.getvalue() == "Line,Data,Error\n"


def test_entries_appended_in_order_and_flushed():
    handle = MagicMock()
    sink = RejectionSink(handle)
    sink.record(_rej(1, "a"))
    sink.record(_rej(2, "b"))
    writes = [c.args[0] for c in handle.write.call_args_list]
    assert writes == ["Line,Data,Error\n", '1,"a","EMPTY_NAME: d"\n', '2,"b","EMPTY_NAME: d"\n']
    # ヘッダ + 2 エントリそれぞれで flush
    assert handle.flush.call_count == 3
    assert sink.written == 2
    assert not sink.degraded


def test_write_failure_is_warning_not_error(caplog):
    handle = MagicMock()
    sink = RejectionSink(handle)
    handle.write.side_effect = OSError("disk full")
    with caplog.at_level(logging.WARNING):
        ok = sink.record(_rej(3))
    assert ok is False
    assert sink.failed == 1
    assert sink.degraded
    assert "disk full" in caplog.text


def test_closed_handle_is_warning(caplog):
    buf = io.StringIO()
    sink = RejectionSink(buf)
    buf.close()
    with caplog.at_level(logging.WARNING):
        assert sink.record(_rej(1)) is False
    assert "could not write" in caplog.text


def test_missing_handle_warns_per_entry(caplog):
    sink = RejectionSink(None)
    with caplog.at_level(logging.WARNING):
        sink.record(_rej(1))
        sink.record(_rej(2))
    assert sink.failed == 2
    assert caplog.text.count("unavailable") == 2


def test_missing_handle_never_writes_header_or_entries():
    sink = RejectionSink(None)
    assert sink.degraded
    assert sink.record(_rej(1)) is False
    assert sink.written == 0


def test_unencodable_entry_is_warning(caplog):
    buf = io.TextIOWrapper(io.BytesIO(), encoding="cp1252", newline="")
    sink = RejectionSink(buf)
    with caplog.at_level(logging.WARNING):
        assert sink.record(_rej(2, "B�,2", RejectionReason.UNEXPECTED_ERROR)) is False
        assert sink.record(_rej(3, "ok")) is True
    assert sink.failed == 1
    assert sink.written == 1
    assert "could not write rejection log entry (line=2)" in caplog.text
