"""Mapping layer - transform store records into typed objects."""

from __future__ import annotations

from pixel_store.mapping.artwork import ArtworkMapper, art_id_key
from pixel_store.mapping.model import RecordModelMapper
from pixel_store.mapping.protocol import RecordMapper
from pixel_store.mapping.schema import (
    ART_SCHEMA,
    COMPLETED_SCHEMA,
    PROGRESS_SCHEMA,
    RecordSchema,
)

__all__ = [
    "ArtworkMapper",
    "art_id_key",
    "RecordModelMapper",
    "RecordMapper",
    "RecordSchema",
    "ART_SCHEMA",
    "PROGRESS_SCHEMA",
    "COMPLETED_SCHEMA",
]
