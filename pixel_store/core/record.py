"""Store-level record primitives.

A Record is an opaque key/value entry tagged with a record type. Inline
field values are JSON-compatible scalars, lists and datetimes; binary
payloads travel as Asset values.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class RecordRef:
    """Store-assigned stable reference to a record."""

    record_name: str

    @classmethod
    def generate(cls) -> RecordRef:
        return cls(str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.record_name


@dataclass(frozen=True)
class Asset:
    """Binary attachment backed by a local file or an in-memory buffer."""

    path: Path | None = None
    data: bytes | None = None

    def __post_init__(self) -> None:
        if self.path is None and self.data is None:
            raise ValueError("Asset needs a path or data")

    def read_bytes(self) -> bytes:
        """Return the attachment content."""
        if self.data is not None:
            return self.data
        assert self.path is not None
        return Path(self.path).read_bytes()


@dataclass
class Record:
    """Mutable key/value record.

    ``ref``, ``creation_date`` and ``modification_date`` are managed by the
    store; a record without a ref has never been saved.
    """

    record_type: str
    fields: dict[str, Any] = field(default_factory=dict)
    ref: RecordRef | None = None
    creation_date: datetime | None = None
    modification_date: datetime | None = None

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.fields[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def project(self, keys: tuple[str, ...] | None) -> Record:
        """Copy of this record restricted to ``keys`` (all fields if None)."""
        if keys is None:
            fields = dict(self.fields)
        else:
            fields = {k: v for k, v in self.fields.items() if k in keys}
        return Record(
            record_type=self.record_type,
            fields=fields,
            ref=self.ref,
            creation_date=self.creation_date,
            modification_date=self.modification_date,
        )
