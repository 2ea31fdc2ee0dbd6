"""Art record mapper.

Art records have been written in two formats over time: the artwork JSON
document inline in ``pixelsJSON``, or as a ``pixelsAsset`` attachment
for large grids. Older inline documents may carry only a ``pixels``
grid. The mapper tries each format in turn:

1. ``pixelsJSON`` decodes as a full artwork document.
2. ``pixelsJSON`` is a JSON object with a ``pixels`` string grid; the
   artwork is assembled from the record's own id, size, title and author.
3. ``pixelsAsset`` bytes decode as a full artwork document.

A record without a UUID ``artId`` and integer ``width``/``height`` is
rejected before any of that.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from pydantic import ValidationError

from pixel_store.core.record import Asset, Record
from pixel_store.mapping.schema import ART_SCHEMA, RecordSchema
from pixel_store.models import Artwork

logger = logging.getLogger(__name__)

PIXELS_JSON = "pixelsJSON"
PIXELS_ASSET = "pixelsAsset"


def art_id_key(artwork_id: str | uuid.UUID) -> str:
    """Canonical ``artId`` text: uppercase UUID form, as older clients wrote it.

    Strings that are not UUIDs are returned unchanged.
    """
    if not isinstance(artwork_id, uuid.UUID):
        try:
            artwork_id = uuid.UUID(artwork_id)
        except ValueError:
            return artwork_id
    return str(artwork_id).upper()


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_uuid(value: Any) -> uuid.UUID | None:
    if not isinstance(value, str):
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _is_string_grid(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(row, list) and all(isinstance(cell, str) for cell in row) for row in value
    )


class ArtworkMapper:
    """Maps Art records to Artwork models."""

    def __init__(self, schema: RecordSchema = ART_SCHEMA) -> None:
        self._schema = schema
        self._fields = schema.field_map

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    def map_record(self, record: Record) -> Artwork | None:
        """Map an Art record, or return None if no format yields an artwork."""
        art_id = _as_uuid(record.get(self._fields["id"]))
        width = _as_int(record.get(self._fields["width"]))
        height = _as_int(record.get(self._fields["height"]))
        if art_id is None or width is None or height is None:
            logger.debug("Art record %s lacks a valid id or size", record.ref)
            return None

        text = record.get(PIXELS_JSON)
        if isinstance(text, str):
            artwork = self._from_document(text)
            if artwork is not None:
                return artwork

            artwork = self._from_pixels_object(text, record, art_id, width, height)
            if artwork is not None:
                return artwork

        asset = record.get(PIXELS_ASSET)
        if isinstance(asset, Asset):
            try:
                data = asset.read_bytes()
            except OSError as e:
                logger.debug("Cannot read pixelsAsset of %s: %s", record.ref, e)
                return None
            artwork = self._from_document(data)
            if artwork is not None:
                return artwork

        logger.debug("Art record %s has no decodable pixel data", record.ref)
        return None

    def map_records(self, records: list[Record]) -> list[Artwork]:
        """Map all records via map_record, dropping failures."""
        results = []
        for record in records:
            artwork = self.map_record(record)
            if artwork is not None:
                results.append(artwork)
        return results

    def to_record(self, artwork: Artwork, record: Record | None = None) -> Record:
        """Write the searchable Art fields of ``artwork`` into a record.

        Pixel data is not written; the caller picks between ``pixelsJSON``
        and ``pixelsAsset``.
        """
        if record is None:
            record = Record(record_type=self._schema.record_type)
        record[self._fields["id"]] = art_id_key(artwork.id)
        record[self._fields["width"]] = artwork.width
        record[self._fields["height"]] = artwork.height
        if artwork.title is not None:
            record[self._fields["title"]] = artwork.title
        if artwork.author is not None:
            record[self._fields["author"]] = artwork.author
        return record

    @staticmethod
    def _from_document(data: str | bytes) -> Artwork | None:
        try:
            return Artwork.from_json(data)
        except ValidationError:
            return None

    def _from_pixels_object(
        self,
        text: str,
        record: Record,
        art_id: uuid.UUID,
        width: int,
        height: int,
    ) -> Artwork | None:
        try:
            document = json.loads(text)
        except ValueError:
            return None
        if not isinstance(document, dict):
            return None
        pixels = document.get("pixels")
        if not _is_string_grid(pixels):
            return None

        try:
            return Artwork(
                id=art_id,
                width=width,
                height=height,
                pixels=pixels,
                numbers=None,
                title=_as_text(record.get(self._fields["title"])),
                author=_as_text(record.get(self._fields["author"])),
            )
        except ValidationError:
            return None
