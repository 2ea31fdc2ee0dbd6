"""Progress repository."""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError

from pixel_store.core.engine import RecordEngine
from pixel_store.core.exceptions import MalformedRecordError, SerializationError
from pixel_store.core.query import SortDescriptor
from pixel_store.core.record import RecordRef
from pixel_store.mapping.model import RecordModelMapper
from pixel_store.mapping.schema import PROGRESS_SCHEMA
from pixel_store.models import ProgressRecord
from pixel_store.repository.base import Repository

logger = logging.getLogger(__name__)


def _check_percent(percent: float) -> float:
    if not isinstance(percent, (int, float)) or isinstance(percent, bool):
        raise SerializationError(f"percent must be a number, got {type(percent).__name__}")
    if math.isnan(percent) or not 0 <= percent <= 100:
        raise SerializationError(f"percent must be within [0, 100], got {percent}")
    return float(percent)


def _check_state(serialized_state: str) -> str:
    if not isinstance(serialized_state, str):
        raise SerializationError(
            f"serialized state must be text, got {type(serialized_state).__name__}"
        )
    return serialized_state


class ProgressRepository(Repository[ProgressRecord]):
    """Progress records in the private database."""

    mapper: RecordModelMapper[ProgressRecord]

    def __init__(self, engine: RecordEngine) -> None:
        super().__init__(engine, PROGRESS_SCHEMA, model=ProgressRecord)

    def _field(self, attr_name: str) -> str:
        return self.schema.field_map[attr_name]

    async def save_progress(
        self,
        art_id: str,
        serialized_state: str,
        percent: float,
    ) -> ProgressRecord:
        """Create a new Progress record.

        Every call creates a record; earlier progress for the same artwork
        is left in place.
        """
        try:
            progress = ProgressRecord(
                progress_id=uuid.uuid4(),
                art_id=art_id,
                pixels_partial_json=_check_state(serialized_state),
                percent_complete=_check_percent(percent),
                last_updated=datetime.now(timezone.utc),
            )
        except ValidationError as e:
            raise SerializationError(str(e)) from e

        saved = await self.save(self.mapper.to_record(progress))
        logger.info("Saved progress %s for artwork %s (%.1f%%)", saved.ref, art_id, percent)
        return progress.model_copy(update={"ref": saved.ref})

    async def update_progress(
        self,
        ref: RecordRef,
        serialized_state: str,
        percent: float,
    ) -> ProgressRecord:
        """Overwrite the state of an existing Progress record.

        Raises:
            SerializationError: If the state is not text or ``percent`` is
                out of range. The store is not touched in that case.
            RecordNotFoundError: If ``ref`` names no Progress record. Nothing
                is written in that case.
        """
        serialized_state = _check_state(serialized_state)
        percent = _check_percent(percent)
        record = await self.engine.fetch_record(
            ref, database=self.schema.database, record_type=self.schema.record_type
        )
        record[self._field("pixels_partial_json")] = serialized_state
        record[self._field("percent_complete")] = percent
        record[self._field("last_updated")] = datetime.now(timezone.utc)

        saved = await self.save(record)
        progress = self.mapper.map_record(saved)
        if progress is None:
            raise MalformedRecordError(self.schema.record_type, f"cannot map record {ref}")
        logger.info("Updated progress %s (%.1f%%)", ref, percent)
        return progress

    async def list_for(self, art_id: str) -> list[ProgressRecord]:
        """Every Progress record of an artwork, least recently updated first."""
        return await self.find_all(
            {self._field("art_id"): art_id},
            sort=(SortDescriptor(self._field("last_updated")),),
        )
