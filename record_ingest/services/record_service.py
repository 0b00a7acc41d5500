from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..db.record_store import RecordStore, StoreError
from ..models.record import Record
from ..models.rejection import RejectionReason
from ..models.result import Rejected
from ..validation.validator import validate

"""Validate-then-persist contract for externally exposed create/update calls.

An HTTP layer maps RecordValidationError to a client error (400) and
RecordStorageError to a server error (500). Validation uses the exact
rule set of the file pipeline and always runs before the store is touched.
"""


class RecordValidationError(Exception):
    status_code = 400

    def __init__(self, reason: RejectionReason, detail: str) -> None:
        super().__init__(f"{reason.value}: {detail}")
        self.reason = reason
        self.detail = detail


class RecordStorageError(Exception):
    status_code = 500


def _fields_from_payload(payload: Mapping[str, Any]) -> list[str]:
    # 欠損キーはフィールド不足として扱う (ファイル側の "Only Name" 行と同じ)
    fields: list[str] = []
    for key in ("name", "price"):
        if key not in payload or payload[key] is None:
            break
        fields.append(str(payload[key]))
    return fields


def validate_payload(payload: Mapping[str, Any]) -> Record:
    """Validate a ``{"name": ..., "price": ...}`` payload.

    Raises:
        RecordValidationError: payload breaks a validation rule
    """
    result = validate(_fields_from_payload(payload))
    if isinstance(result, Rejected):
        raise RecordValidationError(result.reason, result.detail)
    return result.record


def create_record(payload: Mapping[str, Any], store: RecordStore) -> tuple[Any, Record]:
    """Validate then store; returns (record_id, record)."""
    record = validate_payload(payload)
    try:
        return store.store(record), record
    except StoreError as e:
        raise RecordStorageError(str(e)) from e


def update_record(record_id: Any, payload: Mapping[str, Any], store: RecordStore) -> Record:
    record = validate_payload(payload)
    try:
        store.update(record_id, record)
    except StoreError as e:
        raise RecordStorageError(str(e)) from e
    return record
