"""Artwork repository."""

from __future__ import annotations

import logging
import uuid

from pixel_store.core.engine import RecordEngine
from pixel_store.core.query import CREATION_DATE, SortDescriptor
from pixel_store.core.record import RecordRef
from pixel_store.core.staging import staged_asset
from pixel_store.mapping.artwork import PIXELS_ASSET, PIXELS_JSON, ArtworkMapper, art_id_key
from pixel_store.mapping.schema import ART_SCHEMA
from pixel_store.models import Artwork
from pixel_store.repository.base import Repository

logger = logging.getLogger(__name__)


class ArtworkRepository(Repository[Artwork]):
    """Art records in the public database."""

    def __init__(self, engine: RecordEngine) -> None:
        self._artwork_mapper = ArtworkMapper(ART_SCHEMA)
        super().__init__(engine, ART_SCHEMA, mapper=self._artwork_mapper)

    async def fetch_all(self) -> list[Artwork]:
        """All artworks, oldest first. Records that cannot be mapped are skipped."""
        return await self.find_all(sort=(SortDescriptor(CREATION_DATE, ascending=True),))

    async def fetch_one(self, artwork_id: str | uuid.UUID) -> Artwork:
        """The artwork whose ``artId`` equals ``artwork_id``.

        UUID ids are looked up in their canonical uppercase text form.

        Raises:
            RecordNotFoundError: If no Art record has this id, or the one
                that has it cannot be decoded.
            AmbiguousRecordError: If several Art records share it.
        """
        return await self.find_one(art_id_key(artwork_id))

    async def save_artwork(self, artwork: Artwork) -> RecordRef:
        """Create an Art record for ``artwork``.

        The JSON document is stored inline when it fits within the
        configured inline limit, as an attachment otherwise.
        """
        config = self.engine.config
        document = artwork.to_json()
        payload = document.encode("utf-8")
        record = self._artwork_mapper.to_record(artwork)

        if len(payload) <= config.inline_json_limit:
            record[PIXELS_JSON] = document
            saved = await self.save(record)
        else:
            with staged_asset(payload, suffix=".json", directory=config.staging_dir) as asset:
                record[PIXELS_ASSET] = asset
                saved = await self.save(record)

        logger.info("Saved artwork %s (%d bytes) as %s", artwork.id, len(payload), saved.ref)
        assert saved.ref is not None
        return saved.ref
