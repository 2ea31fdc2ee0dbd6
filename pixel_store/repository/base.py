"""Repository base class.

Thin wrapper over RecordEngine + mapper + schema for domain-oriented usage.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pixel_store.core.engine import RecordEngine
from pixel_store.core.query import Query, SortDescriptor
from pixel_store.core.record import Record
from pixel_store.mapping.model import RecordModelMapper
from pixel_store.mapping.protocol import RecordMapper
from pixel_store.mapping.schema import RecordSchema

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository for one record kind.

    Subclasses define domain operations that delegate to the engine. The
    schema decides the record type, the database and the id field.
    """

    def __init__(
        self,
        engine: RecordEngine,
        schema: RecordSchema,
        model: type[T] | None = None,
        mapper: RecordMapper[T] | None = None,
    ) -> None:
        self.engine = engine
        self.schema = schema
        # Accept either a model (to build RecordModelMapper) or a mapper directly
        if mapper is not None:
            self.mapper: RecordMapper[T] | None = mapper
        elif model is not None:
            self.mapper = RecordModelMapper(model, schema)
        else:
            self.mapper = None

    def query(
        self,
        filters: dict[str, Any] | None = None,
        *,
        sort: tuple[SortDescriptor, ...] = (),
        desired_keys: tuple[str, ...] | None = None,
    ) -> Query:
        """Build a query against this repository's record type."""
        return Query(
            record_type=self.schema.record_type,
            filters=dict(filters or {}),
            sort=sort,
            desired_keys=desired_keys,
        )

    async def find_all(
        self,
        filters: dict[str, Any] | None = None,
        *,
        sort: tuple[SortDescriptor, ...] = (),
    ) -> list[T]:
        """Fetch every matching record across all pages."""
        return await self.engine.fetch_all(
            self.query(filters, sort=sort),
            database=self.schema.database,
            mapper=self.mapper,
        )

    async def find_one(self, key: str) -> T:
        """Fetch the single record whose id field equals ``key``."""
        query = self.query(
            {self.schema.id_field: key},
            desired_keys=self.schema.desired_keys,
        )
        return await self.engine.fetch_one(  # type: ignore[no-any-return]
            query,
            database=self.schema.database,
            mapper=self.mapper,
        )

    async def save(self, record: Record) -> Record:
        """Persist a record in this repository's database."""
        return await self.engine.save_record(record, database=self.schema.database)
