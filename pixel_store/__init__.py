"""PixelStore - paginated data access for pixel-art records."""

from __future__ import annotations

import logging

from pixel_store.core.connection import ConnectionManager, StoreConfig
from pixel_store.core.engine import RecordEngine
from pixel_store.core.enums import Database, RecordKind
from pixel_store.core.exceptions import (
    AdapterError,
    AmbiguousRecordError,
    ConnectionError,  # noqa: A004
    CursorError,
    MalformedRecordError,
    MappingError,
    NotFoundError,
    PixelStoreError,
    PoolError,
    RecordNotFoundError,
    SerializationError,
    StoreError,
    UnmappableRecordError,
)
from pixel_store.core.query import Cursor, Query, QueryPage, SortDescriptor
from pixel_store.core.record import Asset, Record, RecordRef
from pixel_store.mapping.artwork import ArtworkMapper
from pixel_store.mapping.model import RecordModelMapper
from pixel_store.models import Artwork, CompletedRecord, ProgressRecord
from pixel_store.store import PixelArtStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Client
    "PixelArtStore",
    # Connection
    "StoreConfig",
    "ConnectionManager",
    # Engine
    "RecordEngine",
    # Records
    "Record",
    "RecordRef",
    "Asset",
    "Query",
    "QueryPage",
    "Cursor",
    "SortDescriptor",
    # Models
    "Artwork",
    "ProgressRecord",
    "CompletedRecord",
    # Mapping
    "ArtworkMapper",
    "RecordModelMapper",
    # Enums
    "Database",
    "RecordKind",
    # Exceptions
    "PixelStoreError",
    "NotFoundError",
    "RecordNotFoundError",
    "UnmappableRecordError",
    "AmbiguousRecordError",
    "MappingError",
    "MalformedRecordError",
    "SerializationError",
    "StoreError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
    "CursorError",
]
