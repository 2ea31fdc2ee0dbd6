"""Record store adapters."""

from __future__ import annotations

from pixel_store.adapters.memory import MemoryAdapter, MemoryStore
from pixel_store.adapters.protocol import AsyncRecordAdapter

__all__ = [
    "AsyncRecordAdapter",
    "MemoryAdapter",
    "MemoryStore",
]
