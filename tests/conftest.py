"""Shared test fixtures."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any

import pytest

from pixel_store.adapters.memory import MemoryAdapter, MemoryStore
from pixel_store.core.connection import StoreConfig
from pixel_store.core.engine import RecordEngine
from pixel_store.core.record import Record
from pixel_store.mapping.artwork import art_id_key
from pixel_store.models import Artwork
from pixel_store.store import PixelArtStore

CAT_ID = uuid.UUID("6f1c1a9e-3d2b-4c8e-9a41-0b7d2f5e8c10")


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Directory receiving staged attachment files."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def memory_config(staging_dir: Path) -> StoreConfig:
    """In-memory store config with small pages so pagination kicks in."""
    return StoreConfig(driver="memory", page_size=2, staging_dir=staging_dir)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine(memory_config: StoreConfig, memory_store: MemoryStore) -> RecordEngine:
    return RecordEngine.from_config(memory_config, MemoryAdapter(memory_store))


@pytest.fixture
def store(engine: RecordEngine) -> PixelArtStore:
    return PixelArtStore(engine)


@pytest.fixture
def cat() -> Artwork:
    """The 2x2 checkerboard cat."""
    return Artwork(
        id=CAT_ID,
        width=2,
        height=2,
        pixels=[["0xffffffff", "0x000000ff"], ["0x000000ff", "0xffffffff"]],
        numbers=None,
        title="Cat",
        author=None,
    )


@pytest.fixture
def make_artwork():
    """Helper building a small single-color artwork.

    Usage:
        make_artwork(title="Dog", width=3, height=1)
    """

    def _make(
        *,
        width: int = 2,
        height: int = 2,
        color: str = "0xff0000ff",
        title: str | None = None,
        author: str | None = None,
        with_numbers: bool = False,
    ) -> Artwork:
        return Artwork(
            id=uuid.uuid4(),
            width=width,
            height=height,
            pixels=[[color] * width for _ in range(height)],
            numbers=[[1] * width for _ in range(height)] if with_numbers else None,
            title=title,
            author=author,
        )

    return _make


@pytest.fixture
def art_record():
    """Helper building a raw Art record with inline JSON pixels.

    Usage:
        art_record(artwork) or art_record(artwork, pixelsJSON=None, width="2")
    """

    def _record(artwork: Artwork, **overrides: Any) -> Record:
        fields: dict[str, Any] = {
            "artId": art_id_key(artwork.id),
            "width": artwork.width,
            "height": artwork.height,
            "pixelsJSON": artwork.to_json(),
        }
        if artwork.title is not None:
            fields["title"] = artwork.title
        if artwork.author is not None:
            fields["author"] = artwork.author
        for key, value in overrides.items():
            if value is None:
                fields.pop(key, None)
            else:
                fields[key] = value
        return Record(record_type="Art", fields=fields)

    return _record
