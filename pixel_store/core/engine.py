"""Record store engine.

The RecordEngine issues queries through the adapter, walks continuation
cursors, and optionally applies a mapper to the returned records. Every
public method is a coroutine that settles exactly once.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from pixel_store.core.connection import ConnectionManager, StoreConfig
from pixel_store.core.enums import Database
from pixel_store.core.exceptions import (
    AmbiguousRecordError,
    PixelStoreError,
    RecordNotFoundError,
    StoreError,
    UnmappableRecordError,
)
from pixel_store.core.query import Cursor, Query, QueryPage
from pixel_store.core.record import Record, RecordRef

logger = logging.getLogger(__name__)


def _describe(query: Query) -> str:
    if not query.filters:
        return "*"
    return ", ".join(f"{k}={v}" for k, v in query.filters.items())


class RecordEngine:
    """Asynchronous record store client."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager

    @classmethod
    def from_config(cls, config: StoreConfig, adapter: Any | None = None) -> RecordEngine:
        """Create a RecordEngine from a StoreConfig.

        Args:
            config: StoreConfig instance
            adapter: Adapter instance overriding the one named by config.driver

        Returns:
            RecordEngine instance
        """
        return cls(ConnectionManager(config, adapter))

    @property
    def config(self) -> StoreConfig:
        return self._connection_manager.config

    async def close(self) -> None:
        await self._connection_manager.close_pool()

    async def __aenter__(self) -> RecordEngine:
        await self._connection_manager.initialize_pool()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def query_page(
        self,
        query: Query | None = None,
        *,
        cursor: Cursor | None = None,
        database: Database,
    ) -> QueryPage:
        """Fetch one page, either starting ``query`` or continuing ``cursor``."""
        if (query is None) == (cursor is None):
            raise ValueError("query_page needs exactly one of query or cursor")

        async with self._connection_manager.get_connection() as conn:
            try:
                page = await self._connection_manager.adapter.query_async(
                    conn, database, query, cursor
                )
            except PixelStoreError:
                raise
            except Exception as e:
                raise StoreError("query", str(e)) from e

        logger.debug(
            "Fetched page of %d records from %s (more=%s)",
            len(page.records),
            database.value,
            page.has_more,
        )
        return page

    async def fetch_all(
        self,
        query: Query,
        *,
        database: Database,
        mapper: Any | None = None,
    ) -> list[Any]:
        """Fetch every page of ``query`` and return the concatenated results.

        The first page is requested with the query itself; every later page
        is requested with the cursor returned by the previous one. Records
        the mapper rejects are skipped. Any page failure aborts the fetch
        and discards what was accumulated.
        """
        results: list[Any] = []
        page = await self.query_page(query, database=database)
        pages = 1

        while True:
            for record in page.records:
                if mapper is None:
                    results.append(record)
                    continue
                item = mapper.map_record(record)
                if item is None:
                    logger.debug(
                        "Skipping malformed %s record %s", record.record_type, record.ref
                    )
                    continue
                results.append(item)

            if page.cursor is None:
                break
            page = await self.query_page(cursor=page.cursor, database=database)
            pages += 1

        logger.debug(
            "Fetched %d %s results across %d pages", len(results), query.record_type, pages
        )
        return results

    async def fetch_one(
        self,
        query: Query,
        *,
        database: Database,
        mapper: Any | None = None,
    ) -> Any:
        """Fetch exactly one matching record.

        Raises RecordNotFoundError if nothing matches, AmbiguousRecordError
        if more than one record matches, and UnmappableRecordError (a
        RecordNotFoundError) if the single match cannot be mapped.
        """
        # Two results are enough to detect ambiguity.
        page = await self.query_page(
            dataclasses.replace(query, results_limit=2), database=database
        )
        key = _describe(query)
        count = len(page.records)

        if count == 0:
            raise RecordNotFoundError(query.record_type, key)
        if count > 1 or page.cursor is not None:
            raise AmbiguousRecordError(query.record_type, key, max(count, 2))

        record = page.records[0]
        if mapper is None:
            return record
        item = mapper.map_record(record)
        if item is None:
            logger.debug("Single %s match %s cannot be mapped", query.record_type, record.ref)
            raise UnmappableRecordError(query.record_type, key, record.ref)
        return item

    async def fetch_record(
        self,
        ref: RecordRef,
        *,
        database: Database,
        record_type: str | None = None,
    ) -> Record:
        """Fetch a record by its store reference.

        With ``record_type`` set, a record of another type counts as missing.
        """
        async with self._connection_manager.get_connection() as conn:
            try:
                record = await self._connection_manager.adapter.fetch_record_async(
                    conn, database, ref
                )
            except PixelStoreError:
                raise
            except Exception as e:
                raise StoreError("fetch", str(e)) from e

        if record is None or (record_type is not None and record.record_type != record_type):
            raise RecordNotFoundError(record_type or "record", str(ref))
        return record  # type: ignore[no-any-return]

    async def save_record(self, record: Record, *, database: Database) -> Record:
        """Insert ``record``, or overwrite the record sharing its ref."""
        async with self._connection_manager.get_connection() as conn:
            try:
                saved = await self._connection_manager.adapter.save_record_async(
                    conn, database, record
                )
            except PixelStoreError:
                raise
            except Exception as e:
                raise StoreError("save", str(e)) from e

        logger.debug("Saved %s record %s to %s", saved.record_type, saved.ref, database.value)
        return saved  # type: ignore[no-any-return]
