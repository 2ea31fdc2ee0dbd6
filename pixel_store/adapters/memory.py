"""In-process record store adapter.

Keeps records in dictionaries, one per database. Useful for tests and
local development; contents vanish with the process.
"""

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pixel_store.core.connection import StoreConfig
from pixel_store.core.enums import Database
from pixel_store.core.query import (
    CREATION_DATE,
    Cursor,
    Query,
    QueryPage,
    decode_cursor,
    encode_cursor,
)
from pixel_store.core.record import Asset, Record, RecordRef


@dataclass
class _Entry:
    seq: int
    record: Record


@dataclass
class MemoryStore:
    """Shared state behind every connection of a MemoryAdapter pool."""

    databases: dict[Database, dict[str, _Entry]] = field(
        default_factory=lambda: {db: {} for db in Database}
    )
    _seq: itertools.count = field(default_factory=itertools.count)  # type: ignore[type-arg]

    def next_seq(self) -> int:
        return next(self._seq)

    def count(self, database: Database, record_type: str | None = None) -> int:
        entries = self.databases[database].values()
        if record_type is None:
            return len(entries)
        return sum(1 for e in entries if e.record.record_type == record_type)


@dataclass
class MemoryConnection:
    """A view of a MemoryStore with the page size of one engine."""

    store: MemoryStore
    page_size: int


def _sort_value(entry: _Entry, key: str) -> tuple[int, Any]:
    if key == CREATION_DATE:
        value = entry.record.creation_date
    else:
        value = entry.record.fields.get(key)
    # None sorts first
    return (0, 0) if value is None else (1, value)


def _detach(value: Any) -> Any:
    """Copy a field value so store state never aliases caller objects."""
    if isinstance(value, Asset):
        return Asset(data=value.read_bytes())
    return copy.deepcopy(value)


class MemoryAdapter:
    """Record store adapter backed by a MemoryStore."""

    def __init__(self, store: MemoryStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> MemoryStore | None:
        return self._store

    async def create_pool_async(self, config: StoreConfig) -> MemoryConnection:
        if self._store is None:
            self._store = MemoryStore()
        return MemoryConnection(self._store, config.page_size)

    async def acquire_connection_async(self, pool: MemoryConnection) -> MemoryConnection:
        return pool

    async def release_connection_async(
        self, connection: MemoryConnection, pool: MemoryConnection
    ) -> None:
        return None

    async def close_pool_async(self, pool: MemoryConnection) -> None:
        return None

    async def query_async(
        self,
        connection: MemoryConnection,
        database: Database,
        query: Query | None,
        cursor: Cursor | None,
    ) -> QueryPage:
        if cursor is not None:
            query, offset = decode_cursor(cursor)
        else:
            offset = 0
        assert query is not None

        entries = [
            e
            for e in connection.store.databases[database].values()
            if e.record.record_type == query.record_type
            and all(e.record.fields.get(k) == v for k, v in query.filters.items())
        ]
        entries.sort(key=lambda e: e.seq)
        # Stable sorts applied from the least significant descriptor.
        for descriptor in reversed(query.sort):
            entries.sort(
                key=lambda e, k=descriptor.key: _sort_value(e, k),  # type: ignore[misc]
                reverse=not descriptor.ascending,
            )

        limit = query.results_limit or connection.page_size
        window = entries[offset : offset + limit]
        next_offset = offset + len(window)
        next_cursor = encode_cursor(query, next_offset) if next_offset < len(entries) else None

        records = [e.record.project(query.desired_keys) for e in window]
        return QueryPage(records=copy.deepcopy(records), cursor=next_cursor)

    async def fetch_record_async(
        self,
        connection: MemoryConnection,
        database: Database,
        ref: RecordRef,
    ) -> Record | None:
        entry = connection.store.databases[database].get(ref.record_name)
        if entry is None:
            return None
        return copy.deepcopy(entry.record)

    async def save_record_async(
        self,
        connection: MemoryConnection,
        database: Database,
        record: Record,
    ) -> Record:
        now = datetime.now(timezone.utc)
        ref = record.ref or RecordRef.generate()
        table = connection.store.databases[database]
        existing = table.get(ref.record_name)

        stored = Record(
            record_type=record.record_type,
            fields={k: _detach(v) for k, v in record.fields.items()},
            ref=ref,
            creation_date=existing.record.creation_date if existing else now,
            modification_date=now,
        )
        seq = existing.seq if existing else connection.store.next_seq()
        table[ref.record_name] = _Entry(seq=seq, record=stored)
        return copy.deepcopy(stored)
