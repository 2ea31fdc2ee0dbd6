"""PixelArtStore - the pixel-art data-access client.

One explicit object per store connection. It owns a RecordEngine and
exposes the artwork, progress and completed-export operations.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any

from pixel_store.core.connection import StoreConfig
from pixel_store.core.engine import RecordEngine
from pixel_store.core.record import RecordRef
from pixel_store.models import Artwork, CompletedRecord, ProgressRecord
from pixel_store.repository.artwork import ArtworkRepository
from pixel_store.repository.completed import CompletedRepository
from pixel_store.repository.progress import ProgressRepository


class PixelArtStore:
    """Asynchronous pixel-art record client.

    Every operation is a coroutine that settles once, with a result or a
    PixelStoreError.
    """

    def __init__(self, engine: RecordEngine) -> None:
        self.engine = engine
        self.artworks = ArtworkRepository(engine)
        self.progress = ProgressRepository(engine)
        self.completed = CompletedRepository(engine)

    @classmethod
    def from_config(cls, config: StoreConfig, adapter: Any | None = None) -> PixelArtStore:
        """Create a PixelArtStore from a StoreConfig."""
        return cls(RecordEngine.from_config(config, adapter))

    async def close(self) -> None:
        await self.engine.close()

    async def __aenter__(self) -> PixelArtStore:
        await self.engine.__aenter__()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # --- Artworks ---

    async def fetch_all_artworks(self) -> list[Artwork]:
        return await self.artworks.fetch_all()

    async def fetch_artwork(self, artwork_id: str | uuid.UUID) -> Artwork:
        return await self.artworks.fetch_one(artwork_id)

    async def save_artwork(self, artwork: Artwork) -> RecordRef:
        return await self.artworks.save_artwork(artwork)

    # --- Progress ---

    async def save_progress(
        self, art_id: str, serialized_state: str, percent: float
    ) -> ProgressRecord:
        return await self.progress.save_progress(art_id, serialized_state, percent)

    async def update_progress(
        self, ref: RecordRef, serialized_state: str, percent: float
    ) -> ProgressRecord:
        return await self.progress.update_progress(ref, serialized_state, percent)

    async def list_progress(self, art_id: str) -> list[ProgressRecord]:
        return await self.progress.list_for(art_id)

    # --- Completed ---

    async def save_completed(
        self,
        art_id: str,
        artwork: Artwork,
        rendered_image: bytes | Path | str | None = None,
    ) -> CompletedRecord:
        return await self.completed.save_completed(art_id, artwork, rendered_image)

    async def list_completed(self, art_id: str) -> list[CompletedRecord]:
        return await self.completed.list_for(art_id)
