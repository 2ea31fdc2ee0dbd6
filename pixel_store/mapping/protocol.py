"""Mapper protocol.

All mappers implement this interface. The engine calls map_record for
every fetched record and drops the ones that map to None.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from pixel_store.core.record import Record

T_co = TypeVar("T_co", covariant=True)


class RecordMapper(Protocol[T_co]):
    """Base mapper protocol."""

    def map_record(self, record: Record) -> T_co | None:
        """Map a record to a target object, or None if it cannot be mapped."""
        ...

    def map_records(self, records: list[Record]) -> list[T_co]:
        """Map records, dropping the ones that cannot be mapped."""
        ...
