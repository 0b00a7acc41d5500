from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from ..logging.rejection_sink import RejectionSink
from ..models.batch_summary import BatchSummary
from ..models.config_models import IngestConfig
from ..models.record import RawLine, Record
from ..models.rejection import Rejection, RejectionReason
from ..models.result import Accepted
from ..parsing.line_parser import split_line, strip_line_terminator
from ..validation.validator import validate
from .progress import LineProgress
from .reporter import filter_by_threshold, write_records_csv
from .resource_guard import ResourceGuard

logger = logging.getLogger(__name__)

"""Ingestion pipeline orchestration.

read lines -> parse -> validate -> accepted list | rejection sink -> summary,
then filter and write the output file.

Error policy:
- 行単位の失敗 (検証エラー・想定外の例外) は Rejection として記録し、処理は継続
- 入力は行ごとにデコードし、デコード不能な行も Rejection (UNEXPECTED_ERROR)
- 入力ファイルを開けない/読めない (OSError) 場合のみ IngestionError (実行全体の失敗)
- 出力・リジェクトログの書き込み失敗は WARN のみ
"""


class IngestionError(Exception):
    """Fatal run-level failure: the input source could not be opened or read."""


class RunState(Enum):
    """Lifecycle of one run: OPEN -> READING -> (TERMINATED | FAILED)."""
    OPEN = "open"
    READING = "reading"
    TERMINATED = "terminated"
    FAILED = "failed"


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of a completed run."""
    accepted: tuple[Record, ...]
    rejections: tuple[Rejection, ...]
    selected: tuple[Record, ...]  # 出力ファイル対象 (threshold 適用後)
    summary: BatchSummary
    written_rows: int
    rejection_log_degraded: bool = False


class RecordProcessor:
    """Per-line state machine over one input stream.

    The first line is the header and is skipped without being counted.
    Every other line ends as exactly one accepted Record or one Rejection,
    so accepted + rejected always equals the number of data lines.
    """

    def __init__(
        self,
        sink: RejectionSink,
        progress: LineProgress | None = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        self.sink = sink
        self.progress = progress
        self.encoding = encoding
        self.state = RunState.OPEN
        self.accepted: list[Record] = []
        self.rejections: list[Rejection] = []
        self.total_lines = 0
        self._reason_counts: dict[str, int] = {}

    def process(self, lines: Iterable[str | bytes]) -> BatchSummary:
        """Consume every line and return the summary.

        Lines may be text or raw bytes. Bytes are decoded one line at a time
        with ``self.encoding``, so an undecodable line is rejected on its own.
        Errors raised by the line source itself (OSError) leave the processor
        in FAILED state and propagate to the caller.
        """
        self.state = RunState.READING
        try:
            for index, line in enumerate(lines):
                if index == 0:
                    continue  # header
                self._step(index, line)
        except BaseException:
            self.state = RunState.FAILED
            raise
        self.state = RunState.TERMINATED
        return self.summary()

    def summary(self) -> BatchSummary:
        return BatchSummary(
            total_lines=self.total_lines,
            accepted=len(self.accepted),
            rejected=len(self.rejections),
            rejections_by_reason=dict(self._reason_counts),
        )

    def _step(self, line_number: int, line: str | bytes) -> None:
        self.total_lines += 1
        if isinstance(line, bytes):
            try:
                text = line.decode(self.encoding)
            except UnicodeDecodeError as e:
                # ログ用の生テキストは置換文字で残す
                raw = RawLine(
                    line_number=line_number,
                    text=strip_line_terminator(line.decode(self.encoding, errors="replace")),
                )
                self._reject(raw, RejectionReason.UNEXPECTED_ERROR, f"Unexpected error: {e}")
                self._advance()
                return
        else:
            text = line
        self._classify(RawLine(line_number=line_number, text=strip_line_terminator(text)))
        self._advance()

    def _classify(self, raw: RawLine) -> None:
        if not raw.text.strip():
            self._reject(raw, RejectionReason.EMPTY_LINE, "Empty line")
        else:
            try:
                result = validate(split_line(raw.text))
            except Exception as e:
                # 想定外の例外も行単位で隔離し、バッチ全体は止めない
                logger.debug("unexpected error line=%d", raw.line_number, exc_info=True)
                self._reject(raw, RejectionReason.UNEXPECTED_ERROR, f"Unexpected error: {e}")
            else:
                if isinstance(result, Accepted):
                    self.accepted.append(result.record)
                else:
                    self._reject(raw, result.reason, result.detail)

    def _advance(self) -> None:
        if self.progress is not None:
            self.progress.advance(len(self.accepted), len(self.rejections))

    def _reject(self, raw: RawLine, reason: RejectionReason, detail: str) -> None:
        rejection = Rejection(
            line_number=raw.line_number,
            raw_text=raw.text,
            reason=reason,
            detail=detail,
        )
        self.rejections.append(rejection)
        self._reason_counts[reason.value] = self._reason_counts.get(reason.value, 0) + 1
        logger.debug("rejected line=%d reason=%s detail=%s", raw.line_number, reason.value, detail)
        self.sink.record(rejection)


def _open_for_write(guard: ResourceGuard, name: str, path: Path, encoding: str) -> Any:
    """Open an output target; a failure is a warning and yields None."""
    try:
        return guard.acquire(name, path.open("w", encoding=encoding, newline=""))
    except OSError as e:
        logger.warning("could not open %s %s: %s", name, path, e)
        return None


def run_pipeline(config: IngestConfig) -> IngestionResult:
    """Run one ingestion pass: input file -> output file + rejection log.

    All three handles are acquired through a single ResourceGuard and released
    on every exit path.

    Raises:
        IngestionError: input missing or unreadable
    """
    input_path = Path(config.input_path)
    output_path = Path(config.output_path)
    log_path = Path(config.rejection_log_path)

    with ResourceGuard() as guard:
        try:
            # バイナリで読み、行ごとにデコードする (行末は strip_line_terminator で除去)
            reader = guard.acquire("input reader", input_path.open("rb"))
        except OSError as e:
            raise IngestionError(f"cannot open input {input_path}: {e}") from e

        log_handle = _open_for_write(guard, "rejection log writer", log_path, config.encoding)
        out_handle = _open_for_write(guard, "output writer", output_path, config.encoding)

        sink = RejectionSink(log_handle)
        with LineProgress(description=f"Reading {input_path.name}") as progress:
            processor = RecordProcessor(sink, progress, encoding=config.encoding)
            try:
                summary = processor.process(reader)
            except OSError as e:
                raise IngestionError(f"failed reading input {input_path}: {e}") from e

        accepted = tuple(processor.accepted)
        if config.price_threshold is None:
            selected = accepted
        else:
            selected = tuple(filter_by_threshold(accepted, config.price_threshold))
        written = write_records_csv(out_handle, selected)

    logger.debug("guard closed=%s failures=%s", guard.closed, guard.close_failures)
    return IngestionResult(
        accepted=accepted,
        rejections=tuple(processor.rejections),
        selected=selected,
        summary=summary,
        written_rows=written,
        rejection_log_degraded=sink.degraded,
    )
