from __future__ import annotations

import logging
from typing import TextIO

from ..models.rejection import REJECTION_LOG_HEADER, Rejection

"""Rejection sink: durable, append-only CSV log of rejected lines.

- ヘッダ `Line,Data,Error` は実行開始時に 1 回だけ書く
- 1 エントリごとに flush (次行の処理でクラッシュしても残る)
- 書き込み失敗は WARN のみ。パイプラインは中断しない
"""

__all__ = [
    "RejectionSink",
]

logger = logging.getLogger(__name__)


class RejectionSink:
    """Writes Rejection entries to an already-open text handle.

    The handle is owned by the caller (normally a ResourceGuard); the sink
    never closes it. A ``None`` handle means the log could not be opened:
    every entry is then reported as a warning instead of written.
    """

    def __init__(self, handle: TextIO | None, *, name: str = "rejection log") -> None:
        self._handle = handle
        self._name = name
        self.written = 0
        self.failed = 0
        if handle is not None:
            if not self._write_line(handle, REJECTION_LOG_HEADER, context="header"):
                self.failed += 1

    @property
    def degraded(self) -> bool:
        return self._handle is None or self.failed > 0

    def record(self, rejection: Rejection) -> bool:
        """Append one entry and flush it.

        Returns:
            True when the entry reached the log, False when it was only warned about
        """
        handle = self._handle
        if handle is None:
            self.failed += 1
            logger.warning(
                "%s unavailable, dropped line=%d reason=%s",
                self._name,
                rejection.line_number,
                rejection.reason.value,
            )
            return False
        if self._write_line(handle, rejection.to_csv_row(), context=f"line={rejection.line_number}"):
            self.written += 1
            return True
        self.failed += 1
        return False

    def _write_line(self, handle: TextIO, text: str, *, context: str) -> bool:
        try:
            handle.write(text + "\n")
            handle.flush()
        except (OSError, ValueError) as e:  # ValueError: closed file / 符号化できない文字
            logger.warning("could not write %s entry (%s): %s", self._name, context, e)
            return False
        return True
