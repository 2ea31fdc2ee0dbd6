"""SQLite record store adapter using aiosqlite.

Records are rows holding a JSON document of their inline fields.
Attachments are stored as blobs in a side table keyed by record and field.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pixel_store.core.connection import StoreConfig
from pixel_store.core.enums import Database
from pixel_store.core.exceptions import AdapterError
from pixel_store.core.query import (
    CREATION_DATE,
    Cursor,
    Query,
    QueryPage,
    decode_cursor,
    encode_cursor,
)
from pixel_store.core.record import Asset, Record, RecordRef

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS records (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        zone TEXT NOT NULL,
        record_type TEXT NOT NULL,
        record_name TEXT NOT NULL,
        fields TEXT NOT NULL,
        creation_date TEXT NOT NULL,
        modification_date TEXT NOT NULL,
        UNIQUE (zone, record_name)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS assets (
        zone TEXT NOT NULL,
        record_name TEXT NOT NULL,
        field TEXT NOT NULL,
        data BLOB NOT NULL,
        PRIMARY KEY (zone, record_name, field)
    )
    """,
    "CREATE INDEX IF NOT EXISTS records_type_idx ON records (zone, record_type)",
)

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_DATE_TAG = "$date"
_ASSET_TAG = "$asset"


def _timestamp(value: datetime) -> str:
    """Fixed-width UTC ISO text so lexical order equals time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _json_path(key: str) -> str:
    if not _FIELD_NAME.match(key):
        raise AdapterError(f"Unsupported field name in query: {key!r}")
    return f"$.{key}"


def _encode_fields(fields: dict[str, Any]) -> tuple[str, dict[str, bytes]]:
    """Split fields into a JSON document and attachment payloads."""
    inline: dict[str, Any] = {}
    assets: dict[str, bytes] = {}
    for key, value in fields.items():
        if isinstance(value, Asset):
            assets[key] = value.read_bytes()
            inline[key] = {_ASSET_TAG: True}
        elif isinstance(value, datetime):
            inline[key] = {_DATE_TAG: _timestamp(value)}
        else:
            inline[key] = value
    return json.dumps(inline), assets


@dataclass
class SqliteConnection:
    """Pooled aiosqlite connection with the page size of its store."""

    db: Any
    page_size: int


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict) and _DATE_TAG in value:
        return datetime.fromisoformat(value[_DATE_TAG])
    return value


class SqliteAdapter:
    """Record store adapter using aiosqlite."""

    async def create_pool_async(self, config: StoreConfig) -> asyncio.Queue[Any]:
        """Open ``pool_size`` connections and make sure the schema exists."""
        import aiosqlite

        size = config.pool_size
        if config.database == ":memory:" and size > 1:
            # Each in-memory connection would see its own database.
            logger.debug("Using a single connection for in-memory SQLite store")
            size = 1

        pool: asyncio.Queue[Any] = asyncio.Queue()
        try:
            for index in range(size):
                conn = await aiosqlite.connect(config.database)
                pool.put_nowait(SqliteConnection(conn, config.page_size))
                conn.row_factory = aiosqlite.Row
                if config.database != ":memory:":
                    await conn.execute("PRAGMA journal_mode=WAL")
                if index == 0:
                    for statement in _SCHEMA:
                        await conn.execute(statement)
                    await conn.commit()
        except Exception:
            # Connections opened before the failure are already in the pool.
            await self.close_pool_async(pool)
            raise
        return pool

    async def acquire_connection_async(self, pool: asyncio.Queue[Any]) -> SqliteConnection:
        """Wait for a free connection."""
        return await pool.get()

    async def release_connection_async(
        self, connection: SqliteConnection, pool: asyncio.Queue[Any]
    ) -> None:
        pool.put_nowait(connection)

    async def close_pool_async(self, pool: asyncio.Queue[Any]) -> None:
        """Close all idle connections."""
        while not pool.empty():
            conn = pool.get_nowait()
            await conn.db.close()

    async def query_async(
        self,
        connection: SqliteConnection,
        database: Database,
        query: Query | None,
        cursor: Cursor | None,
    ) -> QueryPage:
        if cursor is not None:
            query, offset = decode_cursor(cursor)
        else:
            offset = 0
        if query is None:
            raise AdapterError("query_async called without query or cursor")

        where = ["zone = ?", "record_type = ?"]
        params: list[Any] = [database.value, query.record_type]
        for key, value in query.filters.items():
            where.append("json_extract(fields, ?) = ?")
            params.extend([_json_path(key), value])

        order: list[str] = []
        for descriptor in query.sort:
            direction = "ASC" if descriptor.ascending else "DESC"
            if descriptor.key == CREATION_DATE:
                order.append(f"creation_date {direction}")
            else:
                path = _json_path(descriptor.key)
                order.append(
                    f"COALESCE(json_extract(fields, ?), json_extract(fields, ?)) {direction}"
                )
                params.extend([f'{path}."{_DATE_TAG}"', path])
        order.append("seq ASC")

        limit = query.results_limit or connection.page_size
        sql = (
            "SELECT record_type, record_name, fields, creation_date, modification_date "
            f"FROM records WHERE {' AND '.join(where)} ORDER BY {', '.join(order)} "
            "LIMIT ? OFFSET ?"
        )
        # One extra row tells whether another page exists.
        params.extend([limit + 1, offset])

        async with connection.db.execute(sql, params) as cur:
            rows = await cur.fetchall()

        more = len(rows) > limit
        rows = rows[:limit]
        records = [
            await self._load(connection, database, row, query.desired_keys) for row in rows
        ]
        next_cursor = encode_cursor(query, offset + len(rows)) if more else None
        return QueryPage(records=records, cursor=next_cursor)

    async def fetch_record_async(
        self,
        connection: SqliteConnection,
        database: Database,
        ref: RecordRef,
    ) -> Record | None:
        sql = (
            "SELECT record_type, record_name, fields, creation_date, modification_date "
            "FROM records WHERE zone = ? AND record_name = ?"
        )
        async with connection.db.execute(sql, (database.value, ref.record_name)) as cur:
            row = await cur.fetchone()
        if row is None:
            return None
        return await self._load(connection, database, row, None)

    async def save_record_async(
        self,
        connection: SqliteConnection,
        database: Database,
        record: Record,
    ) -> Record:
        ref = record.ref or RecordRef.generate()
        now = _timestamp(datetime.now(timezone.utc))
        document, assets = _encode_fields(record.fields)

        try:
            await connection.db.execute(
                "INSERT INTO records "
                "(zone, record_type, record_name, fields, creation_date, modification_date) "
                "VALUES (?, ?, ?, ?, ?, ?) "
                "ON CONFLICT (zone, record_name) DO UPDATE SET "
                "record_type = excluded.record_type, fields = excluded.fields, "
                "modification_date = excluded.modification_date",
                (database.value, record.record_type, ref.record_name, document, now, now),
            )
            await connection.db.execute(
                "DELETE FROM assets WHERE zone = ? AND record_name = ?",
                (database.value, ref.record_name),
            )
            await connection.db.executemany(
                "INSERT INTO assets (zone, record_name, field, data) VALUES (?, ?, ?, ?)",
                [(database.value, ref.record_name, k, v) for k, v in assets.items()],
            )
            await connection.db.commit()
        except Exception:
            await connection.db.rollback()
            raise

        stored = await self.fetch_record_async(connection, database, ref)
        assert stored is not None
        return stored

    async def _load(
        self,
        connection: SqliteConnection,
        database: Database,
        row: Any,
        desired_keys: tuple[str, ...] | None,
    ) -> Record:
        """Build a Record from a records row, attaching its asset blobs."""
        raw = json.loads(row["fields"])
        fields: dict[str, Any] = {}
        asset_keys: list[str] = []
        for key, value in raw.items():
            if desired_keys is not None and key not in desired_keys:
                continue
            if isinstance(value, dict) and _ASSET_TAG in value:
                asset_keys.append(key)
            else:
                fields[key] = _decode_value(value)

        if asset_keys:
            placeholders = ", ".join("?" for _ in asset_keys)
            async with connection.db.execute(
                "SELECT field, data FROM assets "
                f"WHERE zone = ? AND record_name = ? AND field IN ({placeholders})",
                (database.value, row["record_name"], *asset_keys),
            ) as cur:
                for asset_row in await cur.fetchall():
                    fields[asset_row["field"]] = Asset(data=bytes(asset_row["data"]))

        return Record(
            record_type=row["record_type"],
            fields=fields,
            ref=RecordRef(row["record_name"]),
            creation_date=datetime.fromisoformat(row["creation_date"]),
            modification_date=datetime.fromisoformat(row["modification_date"]),
        )
