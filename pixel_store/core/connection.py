"""Store configuration and connection management.

StoreConfig is a Pydantic model naming the backend and its tuning knobs.
ConnectionManager resolves the adapter for a driver and hands out pooled
connections through the AsyncRecordAdapter protocol.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from pixel_store.core.exceptions import AdapterError, ConnectionError, PoolError  # noqa: A004

logger = logging.getLogger(__name__)


class StoreConfig(BaseModel):
    """Configuration for a record store.

    ``page_size`` is the number of records per query page when a query sets
    no ``results_limit``. Artwork documents up to ``inline_json_limit`` bytes
    are stored inline; larger ones become attachments staged in
    ``staging_dir`` (the system temp dir when unset).
    """

    driver: str
    database: str = ":memory:"
    pool_size: int = Field(default=1, ge=1)
    page_size: int = Field(default=100, ge=1)
    inline_json_limit: int = Field(default=512 * 1024, ge=0)
    staging_dir: Path | None = None
    extra: dict[str, Any] = {}


# Driver name → "module:Class"
_ADAPTER_MAP: dict[str, str] = {
    "memory": "pixel_store.adapters.memory:MemoryAdapter",
    "sqlite": "pixel_store.adapters.sqlite:SqliteAdapter",
}


def _load_adapter(driver: str) -> Any:
    """Instantiate the adapter registered for ``driver``."""
    target = _ADAPTER_MAP.get(driver.lower())
    if target is None:
        raise AdapterError(f"Unsupported store driver: {driver}")

    module_path, _, cls_name = target.partition(":")
    try:
        adapter_cls = getattr(importlib.import_module(module_path), cls_name)
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e
    return adapter_cls()


class ConnectionManager:
    """Pooled connections for one store."""

    def __init__(self, config: StoreConfig, adapter: Any | None = None) -> None:
        self.config = config
        self._adapter = adapter if adapter is not None else _load_adapter(config.driver)
        self._pool: Any = None
        self._pool_lock = asyncio.Lock()

    @property
    def adapter(self) -> Any:
        return self._adapter

    async def initialize_pool(self) -> Any:
        """Open the pool on first use.

        Concurrent first calls share a single pool.

        Raises:
            ConnectionError: If the adapter cannot open the store.
        """
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            try:
                self._pool = await self._adapter.create_pool_async(self.config)
            except AdapterError:
                raise
            except Exception as e:
                raise ConnectionError(
                    f"Cannot open {self.config.driver} store '{self.config.database}': {e}"
                ) from e
        logger.debug(
            "Opened %s pool for %s (size %d)",
            self.config.driver,
            self.config.database,
            self.config.pool_size,
        )
        return self._pool

    @asynccontextmanager
    async def get_connection(self) -> AsyncIterator[Any]:
        """Borrow a connection for the duration of the block."""
        pool = await self.initialize_pool()
        try:
            connection = await self._adapter.acquire_connection_async(pool)
        except Exception as e:
            raise PoolError(f"Cannot acquire connection: {e}") from e
        try:
            yield connection
        finally:
            await self._adapter.release_connection_async(connection, pool)

    async def close_pool(self) -> None:
        """Close the pool. A later call to get_connection opens a new one."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await self._adapter.close_pool_async(pool)
        logger.debug("Closed %s pool for %s", self.config.driver, self.config.database)
