from __future__ import annotations

import dataclasses

import pytest

from record_ingest.models import BatchSummary, InvalidRecordError, Record, Rejection, RejectionReason


def test_record_trims_name():
    assert Record(name="  Laptop ", price=1299.99).name == "Laptop"


@pytest.mark.parametrize(
    "name, price",
    [("", 1.0), ("   ", 1.0), ("X", -0.01), ("X", 1_000_000.5), ("X", float("nan")), ("X", float("inf"))],
)
def test_record_construction_rejects_invalid_state(name: str, price: float):
    with pytest.raises(InvalidRecordError):
        Record(name=name, price=price)


def test_record_is_immutable():
    r = Record(name="Laptop", price=10.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        r.price = 20.0  # type: ignore[misc]


def test_record_price_comparison_is_strict():
    r = Record(name="Laptop", price=1000.0)
    assert not r.is_price_greater_than(1000.0)
    assert r.is_price_greater_than(999.99)


def test_rejection_csv_row_doubles_quotes():
    rej = Rejection(
        line_number=7,
        raw_text='Bad "quoted" item,abc',
        reason=RejectionReason.MALFORMED_PRICE,
        detail="Invalid price format: 'abc'",
    )
    assert rej.to_csv_row() == (
        '7,"Bad ""quoted"" item,abc","MALFORMED_PRICE: Invalid price format: \'abc\'"'
    )


def test_batch_summary_success_rate():
    assert BatchSummary(total_lines=20, accepted=14, rejected=6).success_rate == 70.0
    assert BatchSummary(total_lines=0, accepted=0, rejected=0).success_rate == 0.0
