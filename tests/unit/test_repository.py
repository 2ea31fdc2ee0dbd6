"""Unit tests for the repositories and PixelArtStore."""

from __future__ import annotations

import uuid
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pixel_store.adapters.memory import MemoryAdapter, MemoryStore
from pixel_store.core.connection import StoreConfig
from pixel_store.core.engine import RecordEngine
from pixel_store.core.enums import Database
from pixel_store.core.exceptions import (
    NotFoundError,
    RecordNotFoundError,
    SerializationError,
    StoreError,
)
from pixel_store.core.record import Record, RecordRef
from pixel_store.mapping.model import RecordModelMapper
from pixel_store.mapping.schema import PROGRESS_SCHEMA
from pixel_store.models import Artwork, ProgressRecord
from pixel_store.repository.base import Repository
from pixel_store.store import PixelArtStore


class TestRepository:
    def test_engine_attribute(self) -> None:
        engine = MagicMock()
        repo = Repository(engine=engine, schema=PROGRESS_SCHEMA)
        assert repo.engine is engine

    def test_mapper_from_model(self) -> None:
        repo = Repository(engine=MagicMock(), schema=PROGRESS_SCHEMA, model=ProgressRecord)
        assert isinstance(repo.mapper, RecordModelMapper)

    def test_mapper_none_without_model(self) -> None:
        repo = Repository(engine=MagicMock(), schema=PROGRESS_SCHEMA)
        assert repo.mapper is None

    def test_query_uses_schema_record_type(self) -> None:
        repo = Repository(engine=MagicMock(), schema=PROGRESS_SCHEMA)
        query = repo.query({"artId": "a"})
        assert query.record_type == "Progress"
        assert query.filters == {"artId": "a"}


class TestArtworks:
    async def test_cat_round_trip(self, store: PixelArtStore, cat: Artwork) -> None:
        await store.save_artwork(cat)

        fetched = await store.fetch_artwork(cat.id)
        assert fetched == cat
        assert fetched.pixels == [["0xffffffff", "0x000000ff"], ["0x000000ff", "0xffffffff"]]
        assert fetched.title == "Cat"
        assert fetched.author is None
        assert await store.fetch_all_artworks() == [cat]

    async def test_fetch_by_string_id(self, store: PixelArtStore, cat: Artwork) -> None:
        await store.save_artwork(cat)
        assert await store.fetch_artwork(str(cat.id)) == cat

    async def test_fetch_missing(self, store: PixelArtStore) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.fetch_artwork(uuid.uuid4())

    async def test_fetch_uppercase_keyed_record(
        self, store: PixelArtStore, cat: Artwork, art_record
    ) -> None:
        await store.engine.save_record(
            art_record(cat, artId=str(cat.id).upper()), database=Database.PUBLIC
        )
        assert await store.fetch_artwork(cat.id) == cat
        assert await store.fetch_artwork(str(cat.id)) == cat

    async def test_fetch_undecodable_record_is_not_found(
        self, store: PixelArtStore, cat: Artwork, art_record
    ) -> None:
        await store.engine.save_record(art_record(cat, pixelsJSON=None), database=Database.PUBLIC)
        with pytest.raises(NotFoundError):
            await store.fetch_artwork(cat.id)

    async def test_fetch_all_in_creation_order(self, store: PixelArtStore, make_artwork) -> None:
        artworks = [make_artwork(title=str(i)) for i in range(5)]
        for artwork in artworks:
            await store.save_artwork(artwork)
        assert await store.fetch_all_artworks() == artworks

    async def test_small_artwork_stored_inline(
        self, store: PixelArtStore, memory_store: MemoryStore, cat: Artwork
    ) -> None:
        ref = await store.save_artwork(cat)
        record = await store.engine.fetch_record(ref, database=Database.PUBLIC)
        assert "pixelsJSON" in record
        assert "pixelsAsset" not in record
        assert record["artId"] == str(cat.id).upper()

    async def test_large_artwork_stored_as_asset(
        self, memory_store: MemoryStore, staging_dir: Path, make_artwork
    ) -> None:
        config = StoreConfig(
            driver="memory", page_size=2, inline_json_limit=64, staging_dir=staging_dir
        )
        store = PixelArtStore.from_config(config, MemoryAdapter(memory_store))
        artwork = make_artwork(width=8, height=8, title="Big")

        ref = await store.save_artwork(artwork)

        record = await store.engine.fetch_record(ref, database=Database.PUBLIC)
        assert "pixelsJSON" not in record
        assert "pixelsAsset" in record
        assert list(staging_dir.iterdir()) == []
        assert await store.fetch_artwork(artwork.id) == artwork


class TestProgress:
    async def test_save_progress(self, store: PixelArtStore, memory_store: MemoryStore) -> None:
        progress = await store.save_progress("art-1", '{"0,0":"0xffffffff"}', 12.5)

        assert progress.ref is not None
        assert progress.art_id == "art-1"
        assert progress.percent_complete == 12.5
        record = await store.engine.fetch_record(progress.ref, database=Database.PRIVATE)
        assert record["progressId"] == str(progress.progress_id)
        assert record["pixelsPartialJSON"] == '{"0,0":"0xffffffff"}'
        assert memory_store.count(Database.PUBLIC) == 0

    async def test_repeated_saves_accumulate(self, store: PixelArtStore) -> None:
        first = await store.save_progress("art-1", "a", 10)
        second = await store.save_progress("art-1", "b", 20)
        await store.save_progress("art-2", "c", 30)

        listed = await store.list_progress("art-1")
        assert [p.ref for p in listed] == [first.ref, second.ref]

    @pytest.mark.parametrize("percent", [-1, 100.5, float("nan")])
    async def test_percent_out_of_range(
        self, store: PixelArtStore, memory_store: MemoryStore, percent: float
    ) -> None:
        with pytest.raises(SerializationError):
            await store.save_progress("art-1", "a", percent)
        assert memory_store.count(Database.PRIVATE) == 0

    @pytest.mark.parametrize("state", [42, None, b"bytes"])
    async def test_update_rejects_non_text_state(
        self, store: PixelArtStore, state: object
    ) -> None:
        saved = await store.save_progress("art-1", "a", 10)
        assert saved.ref is not None

        with pytest.raises(SerializationError, match="serialized state"):
            await store.update_progress(saved.ref, state, 20)  # type: ignore[arg-type]
        with pytest.raises(SerializationError):
            await store.update_progress(RecordRef("missing"), state, 20)  # type: ignore[arg-type]

        [listed] = await store.list_progress("art-1")
        assert listed.pixels_partial_json == "a"
        assert listed.percent_complete == 10

    async def test_update_progress(self, store: PixelArtStore) -> None:
        saved = await store.save_progress("art-1", "a", 10)
        assert saved.ref is not None

        updated = await store.update_progress(saved.ref, "b", 55)

        assert updated.ref == saved.ref
        assert updated.progress_id == saved.progress_id
        assert updated.pixels_partial_json == "b"
        assert updated.percent_complete == 55
        assert updated.last_updated >= saved.last_updated
        assert [p.pixels_partial_json for p in await store.list_progress("art-1")] == ["b"]

    async def test_update_missing_ref_writes_nothing(
        self, store: PixelArtStore, memory_store: MemoryStore
    ) -> None:
        with pytest.raises(RecordNotFoundError, match="Progress"):
            await store.update_progress(RecordRef("missing"), "b", 55)
        assert memory_store.count(Database.PRIVATE) == 0

    async def test_update_rejects_other_record_types(
        self, store: PixelArtStore, memory_store: MemoryStore
    ) -> None:
        other = await store.engine.save_record(
            Record(record_type="Completed", fields={"artId": "x"}), database=Database.PRIVATE
        )
        assert other.ref is not None
        with pytest.raises(RecordNotFoundError):
            await store.update_progress(other.ref, "b", 55)
        assert memory_store.count(Database.PRIVATE, "Progress") == 0


class TestCompleted:
    async def test_save_completed(
        self, store: PixelArtStore, cat: Artwork, staging_dir: Path
    ) -> None:
        completed = await store.save_completed(str(cat.id), cat)

        assert completed.ref is not None
        assert completed.art_id == str(cat.id)
        assert completed.export_png is None
        assert completed.artwork() == cat
        assert list(staging_dir.iterdir()) == []

    async def test_rendered_image_bytes(
        self, store: PixelArtStore, cat: Artwork, staging_dir: Path
    ) -> None:
        completed = await store.save_completed(str(cat.id), cat, b"\x89PNG...")
        assert completed.export_png == b"\x89PNG..."
        assert list(staging_dir.iterdir()) == []

    async def test_rendered_image_path_left_in_place(
        self, store: PixelArtStore, cat: Artwork, tmp_path: Path
    ) -> None:
        png = tmp_path / "cat.png"
        png.write_bytes(b"\x89PNG...")
        completed = await store.save_completed(str(cat.id), cat, png)
        assert completed.export_png == b"\x89PNG..."
        assert png.exists()

    async def test_staged_files_removed_on_failure(
        self, memory_config: StoreConfig, cat: Artwork, staging_dir: Path
    ) -> None:
        staged_counts: list[int] = []

        class BrokenAdapter(MemoryAdapter):
            async def save_record_async(self, connection, database, record):  # type: ignore[no-untyped-def]
                staged_counts.append(len(list(staging_dir.iterdir())))
                raise ConnectionResetError("connection reset")

        store = PixelArtStore.from_config(memory_config, BrokenAdapter())
        with pytest.raises(StoreError, match="connection reset"):
            await store.save_completed(str(cat.id), cat, b"png")
        assert staged_counts == [2]
        assert list(staging_dir.iterdir()) == []

    async def test_serialization_failure_skips_store(self, memory_config: StoreConfig) -> None:
        adapter = MemoryAdapter()
        adapter.save_record_async = MagicMock()  # type: ignore[method-assign]
        store = PixelArtStore(RecordEngine.from_config(memory_config, adapter))

        artwork = MagicMock()
        artwork.to_json.side_effect = ValueError("cannot encode")
        with pytest.raises(SerializationError, match="cannot encode"):
            await store.save_completed("art-1", artwork)
        adapter.save_record_async.assert_not_called()

    async def test_list_completed(self, store: PixelArtStore, cat: Artwork, make_artwork) -> None:
        first = await store.save_completed(str(cat.id), cat)
        await store.save_completed("other", make_artwork())
        second = await store.save_completed(str(cat.id), cat)

        listed = await store.list_completed(str(cat.id))
        assert [c.completed_id for c in listed] == [first.completed_id, second.completed_id]
