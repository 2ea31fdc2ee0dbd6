"""Pixel-art domain models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pixel_store.core.record import RecordRef


def _check_grid(name: str, grid: list[list[Any]], width: int, height: int) -> None:
    if len(grid) != height:
        raise ValueError(f"{name} has {len(grid)} rows, expected {height}")
    for index, row in enumerate(grid):
        if len(row) != width:
            raise ValueError(f"{name} row {index} has {len(row)} cells, expected {width}")


class Artwork(BaseModel):
    """A pixel-art grid and its metadata.

    ``pixels`` holds ``height`` rows of ``width`` color strings (for example
    ``"0xff463f18"``). ``numbers``, when present, holds the paint-by-number
    label of every cell and has the same shape.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: uuid.UUID
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    pixels: list[list[str]]
    numbers: list[list[int]] | None = None
    title: str | None = None
    author: str | None = None

    @model_validator(mode="after")
    def _check_dimensions(self) -> Artwork:
        _check_grid("pixels", self.pixels, self.width, self.height)
        if self.numbers is not None:
            _check_grid("numbers", self.numbers, self.width, self.height)
        return self

    def to_json(self) -> str:
        """Encode as the JSON document stored in ``pixelsJSON``."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes) -> Artwork:
        """Decode a JSON document produced by to_json."""
        return cls.model_validate_json(data)


class ProgressRecord(BaseModel):
    """A saved partial state of an artwork being painted."""

    progress_id: uuid.UUID
    art_id: str
    pixels_partial_json: str
    percent_complete: float = Field(ge=0, le=100)
    last_updated: datetime
    ref: RecordRef | None = None


class CompletedRecord(BaseModel):
    """A finished artwork export."""

    completed_id: uuid.UUID
    art_id: str
    completed_at: datetime
    pixels_json: bytes
    export_png: bytes | None = None
    ref: RecordRef | None = None

    def artwork(self) -> Artwork:
        """Decode the stored final artwork."""
        return Artwork.from_json(self.pixels_json)
