"""Completed-export repository."""

from __future__ import annotations

import logging
import uuid
from contextlib import ExitStack
from datetime import datetime, timezone
from pathlib import Path

from pixel_store.core.engine import RecordEngine
from pixel_store.core.exceptions import MalformedRecordError, SerializationError
from pixel_store.core.query import SortDescriptor
from pixel_store.core.record import Asset, Record
from pixel_store.core.staging import staged_asset
from pixel_store.mapping.model import RecordModelMapper
from pixel_store.mapping.schema import COMPLETED_SCHEMA
from pixel_store.models import Artwork, CompletedRecord
from pixel_store.repository.base import Repository

logger = logging.getLogger(__name__)


class CompletedRepository(Repository[CompletedRecord]):
    """Completed-export records in the private database."""

    mapper: RecordModelMapper[CompletedRecord]

    def __init__(self, engine: RecordEngine) -> None:
        super().__init__(engine, COMPLETED_SCHEMA, model=CompletedRecord)

    def _field(self, attr_name: str) -> str:
        return self.schema.field_map[attr_name]

    async def save_completed(
        self,
        art_id: str,
        artwork: Artwork,
        rendered_image: bytes | Path | str | None = None,
    ) -> CompletedRecord:
        """Create a Completed record holding the final artwork.

        The artwork JSON and an in-memory rendered image are staged as
        temporary files that are removed once the save settles. A rendered
        image given as a path is attached as is and left in place.

        Raises:
            SerializationError: If the artwork cannot be encoded. No store
                call is made in that case.
        """
        try:
            payload = artwork.to_json().encode("utf-8")
        except (AttributeError, ValueError, TypeError) as e:
            raise SerializationError(f"cannot encode artwork: {e}") from e

        completed = CompletedRecord(
            completed_id=uuid.uuid4(),
            art_id=art_id,
            completed_at=datetime.now(timezone.utc),
            pixels_json=payload,
        )
        staging_dir = self.engine.config.staging_dir

        with ExitStack() as stack:
            record: Record = self.mapper.to_record(completed)
            record[self._field("pixels_json")] = stack.enter_context(
                staged_asset(payload, suffix=".json", directory=staging_dir)
            )
            if isinstance(rendered_image, bytes):
                record[self._field("export_png")] = stack.enter_context(
                    staged_asset(rendered_image, suffix=".png", directory=staging_dir)
                )
            elif rendered_image is not None:
                record[self._field("export_png")] = Asset(path=Path(rendered_image))

            saved = await self.save(record)

        logger.info("Saved completed artwork %s for %s as %s", artwork.id, art_id, saved.ref)
        result = self.mapper.map_record(saved)
        if result is None:
            raise MalformedRecordError(self.schema.record_type, f"cannot map record {saved.ref}")
        return result

    async def list_for(self, art_id: str) -> list[CompletedRecord]:
        """Every Completed record of an artwork, oldest first."""
        return await self.find_all(
            {self._field("art_id"): art_id},
            sort=(SortDescriptor(self._field("completed_at")),),
        )
