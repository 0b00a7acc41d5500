from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from psycopg2 import sql
from psycopg2.extras import execute_values

from ..models.record import Record

"""Persistence sink for validated records.

PostgreSQL 実装は psycopg2.extras.execute_values によるバッチ INSERT ... RETURNING id。
DB 無効時 (DISABLE_DB_CONNECT=1 / 接続失敗) は InMemoryRecordStore を使う。
保存は必ず検証後に行う: このモジュールは Record (検証済み) しか受け取らない。
"""

__all__ = [
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "RecordStore",
    "StoreError",
    "StoreResult",
    "persist_records",
]

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


@dataclass(frozen=True)
class StoreResult:
    """Per-record persistence outcome: either record_id or error is set."""
    record: Record
    record_id: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RecordStore(Protocol):
    def store(self, record: Record) -> Any: ...

    def store_many(self, records: Sequence[Record]) -> list[Any]: ...

    def update(self, record_id: Any, record: Record) -> None: ...


class InMemoryRecordStore:
    """Dict-backed store with sequential integer ids (mock mode / tests)."""

    def __init__(self) -> None:
        self.rows: dict[int, Record] = {}
        self._next_id = 1

    def store(self, record: Record) -> int:
        record_id = self._next_id
        self._next_id += 1
        self.rows[record_id] = record
        return record_id

    def store_many(self, records: Sequence[Record]) -> list[int]:
        return [self.store(r) for r in records]

    def update(self, record_id: Any, record: Record) -> None:
        if record_id not in self.rows:
            raise StoreError(f"record not found: {record_id}")
        self.rows[record_id] = record


class PostgresRecordStore:
    """Stores records in a ``(id serial, name text, price numeric)`` table.

    The caller owns the cursor and the transaction boundary.
    """

    def __init__(self, cursor: Any, table: str = "products", page_size: int = 1000) -> None:
        self.cursor = cursor
        self.table = table
        self.page_size = page_size

    def _insert_sql(self) -> Any:
        return sql.SQL("INSERT INTO {} (name, price) VALUES %s RETURNING id").format(
            sql.Identifier(self.table)
        )

    def store(self, record: Record) -> Any:
        ids = self.store_many([record])
        return ids[0]

    def store_many(self, records: Sequence[Record]) -> list[Any]:
        if not records:
            return []
        rows = [(r.name, r.price) for r in records]
        # 失敗した INSERT のみ取り消す (savepoint)
        self.cursor.execute("SAVEPOINT record_store")
        try:
            returned = execute_values(
                self.cursor, self._insert_sql(), rows, page_size=self.page_size, fetch=True
            )
        except Exception as e:
            self.cursor.execute("ROLLBACK TO SAVEPOINT record_store")
            raise StoreError(str(e)) from e
        self.cursor.execute("RELEASE SAVEPOINT record_store")
        return [row[0] for row in returned]

    def update(self, record_id: Any, record: Record) -> None:
        stmt = sql.SQL("UPDATE {} SET name = %s, price = %s WHERE id = %s").format(
            sql.Identifier(self.table)
        )
        try:
            self.cursor.execute(stmt, (record.name, record.price, record_id))
        except Exception as e:
            raise StoreError(str(e)) from e
        if self.cursor.rowcount == 0:
            raise StoreError(f"record not found: {record_id}")


def persist_records(records: Iterable[Record], store: RecordStore) -> list[StoreResult]:
    """Store each record; a failure is recorded and the next record is tried.

    Batch insert first; when the batch fails, fall back to one insert per record
    so a single bad row does not sink the others.
    """
    records = list(records)
    if not records:
        return []
    try:
        ids = store.store_many(records)
    except StoreError as e:
        logger.warning("batch store failed (%s); retrying per record", e)
    else:
        return [StoreResult(record=r, record_id=i) for r, i in zip(records, ids, strict=True)]

    results: list[StoreResult] = []
    for record in records:
        try:
            results.append(StoreResult(record=record, record_id=store.store(record)))
        except StoreError as e:
            logger.warning("could not store name=%s: %s", record.name, e)
            results.append(StoreResult(record=record, error=str(e)))
    return results
