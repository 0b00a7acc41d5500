from __future__ import annotations

import math
import re
from collections.abc import Sequence

from ..models.record import MAX_PRICE, MIN_PRICE, Record
from ..models.rejection import RejectionReason
from ..models.result import Accepted, Rejected, ValidationResult

"""Validator: raw field strings -> Record or classified rejection.

Checks run in a fixed order and the first failing check wins:
INSUFFICIENT_FIELDS, EMPTY_NAME, MALFORMED_PRICE, NEGATIVE_PRICE,
PRICE_OUT_OF_RANGE. No I/O; expected-shape problems are returned as
Rejected values, never raised.
"""

__all__ = [
    "parse_price",
    "validate",
]

# 10進数表記のみ許可 (nan / inf / 1_000 / 全角・非ASCII数字などは不可)
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


def parse_price(text: str) -> float | None:
    """Parse a trimmed price string; None when it is not a finite decimal."""
    if not _DECIMAL_RE.match(text):
        return None
    value = float(text)
    if not math.isfinite(value):  # e.g. "1e999"
        return None
    return value


def validate(fields: Sequence[str]) -> ValidationResult:
    """Validate the fields of one data line.

    Args:
        fields: Raw fields as produced by the line parser

    Returns:
        Accepted carrying the Record, or Rejected with reason and detail
    """
    if len(fields) < 2:
        return Rejected(
            RejectionReason.INSUFFICIENT_FIELDS,
            f"Insufficient data fields (expected 2, got {len(fields)})",
        )

    name = fields[0].strip()
    if not name:
        return Rejected(RejectionReason.EMPTY_NAME, "Product name is empty")

    price_text = fields[1].strip()
    price = parse_price(price_text)
    if price is None:
        return Rejected(RejectionReason.MALFORMED_PRICE, f"Invalid price format: '{price_text}'")

    if price < MIN_PRICE:
        return Rejected(RejectionReason.NEGATIVE_PRICE, f"Product price cannot be negative: {price}")

    if price > MAX_PRICE:
        return Rejected(
            RejectionReason.PRICE_OUT_OF_RANGE,
            f"Product price seems unreasonably high: {price}",
        )

    return Accepted(Record(name=name, price=price))
