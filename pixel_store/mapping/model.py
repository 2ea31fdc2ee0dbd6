"""Schema-driven record-to-model mapper.

Supports Pydantic models, dataclasses, and plain classes.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from pixel_store.core.record import Asset, Record
from pixel_store.mapping.schema import RecordSchema

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _accepts_ref(cls: type) -> bool:
    """Check if the target class has a ``ref`` attribute to receive the record ref."""
    if issubclass(cls, BaseModel):
        return "ref" in cls.model_fields
    if dataclasses.is_dataclass(cls):
        return any(f.name == "ref" for f in dataclasses.fields(cls))
    return False


def _to_field_value(value: Any) -> Any:
    """Convert a model attribute to a value a record field can hold."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, bytes):
        return Asset(data=value)
    return value


class RecordModelMapper(Generic[T]):
    """Record-to-model mapper driven by a RecordSchema.

    Detection order:
    1. Pydantic BaseModel -> model_validate(data)
    2. dataclass -> target_class(**data)
    3. Plain class -> target_class(**data)

    Asset fields named by the schema are read into bytes. Records that
    fail validation map to None.

    Args:
        target_class: The class to construct from record data.
        schema: Field layout of the record kind.
    """

    def __init__(self, target_class: type[T], schema: RecordSchema) -> None:
        self._target_class = target_class
        self._schema = schema
        self._is_pydantic = issubclass(target_class, BaseModel)
        self._accepts_ref = _accepts_ref(target_class)

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    def _extract(self, record: Record) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for attr_name, key in self._schema.field_map.items():
            if key not in record:
                continue
            value = record[key]
            if key in self._schema.asset_fields and isinstance(value, Asset):
                value = value.read_bytes()
            data[attr_name] = value
        if self._accepts_ref:
            data["ref"] = record.ref
        return data

    def map_record(self, record: Record) -> T | None:
        """Map a single record to a target_class instance, or None."""
        if record.record_type != self._schema.record_type:
            return None
        try:
            data = self._extract(record)
        except OSError as e:
            logger.debug("Cannot read asset of %s record %s: %s", record.record_type, record.ref, e)
            return None

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(data)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                logger.debug("Invalid %s record %s: %s", record.record_type, record.ref, e)
                return None

        try:
            return self._target_class(**data)
        except TypeError as e:
            logger.debug("Invalid %s record %s: %s", record.record_type, record.ref, e)
            return None

    def map_records(self, records: list[Record]) -> list[T]:
        """Map all records via map_record, dropping failures."""
        results = []
        for record in records:
            item = self.map_record(record)
            if item is not None:
                results.append(item)
        return results

    def to_record(self, obj: T, record: Record | None = None) -> Record:
        """Write the mapped attributes of ``obj`` into a record.

        ``None`` attributes are left out. An existing record is updated in
        place and returned.
        """
        if record is None:
            record = Record(record_type=self._schema.record_type)
        for attr_name, key in self._schema.field_map.items():
            value = getattr(obj, attr_name, None)
            if value is None:
                continue
            record[key] = _to_field_value(value)
        return record
