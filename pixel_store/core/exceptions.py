"""PixelStore exception hierarchy.

All exceptions are PixelStore-specific. Raw adapter and driver exceptions
are never exposed to callers; they are chained as ``__cause__``.
"""

from __future__ import annotations


class PixelStoreError(Exception):
    """Base exception for all PixelStore errors."""


# --- Lookup ---


class NotFoundError(PixelStoreError):
    """Base for lookup failures."""


class RecordNotFoundError(NotFoundError):
    """Raised when a single-record fetch matches nothing."""

    def __init__(self, record_type: str, key: str) -> None:
        self.record_type = record_type
        self.key = key
        super().__init__(f"{record_type} record not found: '{key}'")


class UnmappableRecordError(RecordNotFoundError):
    """Raised when the single match of a lookup cannot be mapped.

    The lookup found a record but no usable model; callers handling
    RecordNotFoundError see it as a miss.
    """

    def __init__(self, record_type: str, key: str, ref: object) -> None:
        super().__init__(record_type, key)
        self.ref = ref


class AmbiguousRecordError(PixelStoreError):
    """Raised when a single-record fetch matches more than one record."""

    def __init__(self, record_type: str, key: str, count: int) -> None:
        self.record_type = record_type
        self.key = key
        self.count = count
        super().__init__(
            f"{record_type} lookup for '{key}' matched {count} records (expected 1)"
        )


# --- Mapping ---


class MappingError(PixelStoreError):
    """Base for record mapping errors."""


class MalformedRecordError(MappingError):
    """Raised when a record that must be returned cannot be mapped."""

    def __init__(self, record_type: str, detail: str) -> None:
        self.record_type = record_type
        super().__init__(f"Malformed {record_type} record: {detail}")


# --- Serialization ---


class SerializationError(PixelStoreError):
    """Raised when local encoding fails before any store call."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Serialization failed: {detail}")


# --- Store ---


class StoreError(PixelStoreError):
    """Raised when the remote store rejects or fails an operation."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"Store {operation} failed: {detail}")


# --- Adapter ---


class AdapterError(PixelStoreError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""


class CursorError(AdapterError):
    """Raised when a continuation cursor cannot be decoded."""
