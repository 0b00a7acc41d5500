from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Rejection model and the closed reason enumeration.

reason は分岐/テスト用 (閉じた列挙)、detail は診断用の自由文で制御には使わない。
"""

__all__ = [
    "REJECTION_LOG_HEADER",
    "Rejection",
    "RejectionReason",
]

REJECTION_LOG_HEADER = "Line,Data,Error"


class RejectionReason(Enum):
    """Why a data line produced no Record.

    The first five are returned by the validator and checked in declaration
    order; EMPTY_LINE and UNEXPECTED_ERROR are assigned by the pipeline.
    """
    INSUFFICIENT_FIELDS = "INSUFFICIENT_FIELDS"
    EMPTY_NAME = "EMPTY_NAME"
    MALFORMED_PRICE = "MALFORMED_PRICE"
    NEGATIVE_PRICE = "NEGATIVE_PRICE"
    PRICE_OUT_OF_RANGE = "PRICE_OUT_OF_RANGE"
    EMPTY_LINE = "EMPTY_LINE"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


def _quote(value: str) -> str:
    # 内部の " は "" に二重化
    return '"' + value.replace('"', '""') + '"'


@dataclass(frozen=True)
class Rejection:
    """A data line that failed ingestion.

    Attributes:
        line_number: Data line number (1-based, header excluded)
        raw_text: Original line text, unmodified
        reason: Classified reason code
        detail: Human-readable diagnostics
    """
    line_number: int
    raw_text: str
    reason: RejectionReason
    detail: str

    @property
    def message(self) -> str:
        return f"{self.reason.value}: {self.detail}"

    def to_csv_row(self) -> str:
        """Serialize to one rejection-log row (without line terminator).

        Format: ``<line>,"<raw text>","<reason>: <detail>"``
        """
        return f"{self.line_number},{_quote(self.raw_text)},{_quote(self.message)}"
