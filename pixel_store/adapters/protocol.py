"""Record store adapter protocol.

Every adapter module MUST implement this protocol. The engine only talks
to stores through these methods.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pixel_store.core.connection import StoreConfig
from pixel_store.core.enums import Database
from pixel_store.core.query import Cursor, Query, QueryPage
from pixel_store.core.record import Record, RecordRef


@runtime_checkable
class AsyncRecordAdapter(Protocol):
    """Backend of a record store with public and private databases."""

    async def create_pool_async(self, config: StoreConfig) -> Any:
        """Open the store described by ``config`` and return its pool."""
        ...

    async def acquire_connection_async(self, pool: Any) -> Any:
        """Borrow a connection, waiting while none is free."""
        ...

    async def release_connection_async(self, connection: Any, pool: Any) -> None:
        """Return a borrowed connection."""
        ...

    async def close_pool_async(self, pool: Any) -> None:
        """Close every idle connection of the pool."""
        ...

    async def query_async(
        self,
        connection: Any,
        database: Database,
        query: Query | None,
        cursor: Cursor | None,
    ) -> QueryPage:
        """Run ``query`` (first page) or continue ``cursor`` (later pages)."""
        ...

    async def fetch_record_async(
        self,
        connection: Any,
        database: Database,
        ref: RecordRef,
    ) -> Record | None:
        """Fetch a record by reference, or None if absent."""
        ...

    async def save_record_async(
        self,
        connection: Any,
        database: Database,
        record: Record,
    ) -> Record:
        """Insert or overwrite a record; return the stored version."""
        ...
