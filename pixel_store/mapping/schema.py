"""Record schemas.

Frozen dataclasses describing how each record kind lays out its fields.
Mappers are driven by these instead of per-kind code.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pixel_store.core.enums import Database, RecordKind


@dataclass(frozen=True)
class RecordSchema:
    """Field layout of one record kind."""

    kind: RecordKind
    database: Database
    id_field: str
    field_map: dict[str, str]  # attribute_name -> record field name
    asset_fields: frozenset[str] = field(default_factory=frozenset)
    desired_keys: tuple[str, ...] | None = None

    @property
    def record_type(self) -> str:
        return self.kind.value


ART_SCHEMA = RecordSchema(
    kind=RecordKind.ART,
    database=Database.PUBLIC,
    id_field="artId",
    field_map={
        "id": "artId",
        "width": "width",
        "height": "height",
        "title": "title",
        "author": "author",
    },
    asset_fields=frozenset({"pixelsAsset"}),
    desired_keys=("artId", "width", "height", "pixelsJSON", "pixelsAsset", "title", "author"),
)

PROGRESS_SCHEMA = RecordSchema(
    kind=RecordKind.PROGRESS,
    database=Database.PRIVATE,
    id_field="progressId",
    field_map={
        "progress_id": "progressId",
        "art_id": "artId",
        "pixels_partial_json": "pixelsPartialJSON",
        "percent_complete": "percentComplete",
        "last_updated": "lastUpdated",
    },
)

COMPLETED_SCHEMA = RecordSchema(
    kind=RecordKind.COMPLETED,
    database=Database.PRIVATE,
    id_field="completedId",
    field_map={
        "completed_id": "completedId",
        "art_id": "artId",
        "completed_at": "completedAt",
        "pixels_json": "pixelsJSONAsset",
        "export_png": "exportPNG",
    },
    asset_fields=frozenset({"pixelsJSONAsset", "exportPNG"}),
)
