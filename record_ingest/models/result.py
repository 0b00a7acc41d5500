from __future__ import annotations

from dataclasses import dataclass

from .record import Record
from .rejection import RejectionReason

"""Validation outcome variants.

The validator returns exactly one of these; callers branch with isinstance().
"""

__all__ = [
    "Accepted",
    "Rejected",
    "ValidationResult",
]


@dataclass(frozen=True)
class Accepted:
    record: Record


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    detail: str


ValidationResult = Accepted | Rejected
