from __future__ import annotations

import math
from dataclasses import dataclass

"""Record / RawLine domain models.

Record は検証済みの (name, price) 値。構築自体が検証ゲートになっており、
不正な状態の Record インスタンスは存在しない。
"""

__all__ = [
    "MAX_PRICE",
    "MIN_PRICE",
    "InvalidRecordError",
    "RawLine",
    "Record",
]

MIN_PRICE = 0.0
MAX_PRICE = 1_000_000.0


class InvalidRecordError(ValueError):
    """Raised when a Record is constructed directly with violating data."""


@dataclass(frozen=True)
class Record:
    """Validated product record.

    Attributes:
        name: Non-empty name, trimmed of surrounding whitespace
        price: Finite price within [MIN_PRICE, MAX_PRICE]
    """
    name: str
    price: float

    def __post_init__(self) -> None:
        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            raise InvalidRecordError("Product name cannot be null or empty")
        price = float(self.price)
        if not math.isfinite(price):
            raise InvalidRecordError(f"Product price is not a finite number: {self.price}")
        if price < MIN_PRICE:
            raise InvalidRecordError(f"Product price cannot be negative: {price}")
        if price > MAX_PRICE:
            raise InvalidRecordError(f"Product price seems unreasonably high: {price}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "price", price + 0.0)  # -0.0 -> 0.0

    def is_price_greater_than(self, threshold: float) -> bool:
        return self.price > threshold


@dataclass(frozen=True)
class RawLine:
    """One data line as read from the input.

    line_number is 1-based and counts data lines only (header excluded).
    text is the line without its terminator, otherwise verbatim.
    """
    line_number: int
    text: str
