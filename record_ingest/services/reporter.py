from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import TextIO

import pandas as pd

from ..models.record import Record

"""Filter / reporter over the accepted records.

Nothing here mutates the sequence it is given: every consumer of the
accepted records, including repeated filter calls, sees the original set.
"""

__all__ = [
    "OUTPUT_HEADER",
    "filter_by_threshold",
    "format_price",
    "render_table",
    "write_records_csv",
]

logger = logging.getLogger(__name__)

OUTPUT_HEADER = "Name,Price"
EMPTY_TABLE_TEXT = "No records to display."


def filter_by_threshold(records: Sequence[Record], threshold: float) -> list[Record]:
    """Records with price strictly greater than threshold, in input order."""
    return [r for r in records if r.is_price_greater_than(threshold)]


def format_price(price: float) -> str:
    """Plain decimal text for a price (no exponent, no currency, no grouping).

    >>> format_price(49.99)
    '49.99'
    >>> format_price(1e-05)
    '0.00001'
    """
    return format(Decimal(repr(price)), "f")


def render_table(records: Sequence[Record]) -> str:
    """Console table of records (Name | Price)."""
    if not records:
        return EMPTY_TABLE_TEXT
    df = pd.DataFrame(
        {"Name": [r.name for r in records], "Price": [r.price for r in records]}
    )
    return df.to_string(index=False, justify="left", float_format=lambda v: f"${v:,.2f}")


def write_records_csv(handle: TextIO | None, records: Iterable[Record], *, name: str = "output file") -> int:
    """Write header + one ``name,price`` row per record to an open handle.

    Each failed write is reported as a warning and skipped.

    Returns:
        Number of record rows written
    """
    if handle is None:
        logger.warning("%s unavailable, no records written", name)
        return 0
    try:
        handle.write(OUTPUT_HEADER + "\n")
    except (OSError, ValueError) as e:
        logger.warning("could not write %s header: %s", name, e)
    written = 0
    for record in records:
        try:
            handle.write(f"{record.name},{format_price(record.price)}\n")
        except (OSError, ValueError) as e:
            logger.warning("could not write %s row name=%s: %s", name, record.name, e)
            continue
        written += 1
    try:
        handle.flush()
    except (OSError, ValueError) as e:
        logger.warning("could not flush %s: %s", name, e)
    return written
