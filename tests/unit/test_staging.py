"""Unit tests for attachment staging."""

from __future__ import annotations

from pathlib import Path

import pytest

from pixel_store.core.staging import staged_asset


class TestStagedAsset:
    def test_file_exists_inside_block(self, staging_dir: Path) -> None:
        with staged_asset(b"payload", suffix=".json", directory=staging_dir) as asset:
            assert asset.path is not None
            assert asset.path.parent == staging_dir
            assert asset.path.suffix == ".json"
            assert asset.read_bytes() == b"payload"

    def test_file_removed_after_block(self, staging_dir: Path) -> None:
        with staged_asset(b"payload", directory=staging_dir) as asset:
            path = asset.path
        assert path is not None
        assert not path.exists()

    def test_file_removed_on_error(self, staging_dir: Path) -> None:
        with pytest.raises(RuntimeError):
            with staged_asset(b"payload", directory=staging_dir):
                raise RuntimeError("save failed")
        assert list(staging_dir.iterdir()) == []

    def test_file_already_gone(self, staging_dir: Path) -> None:
        with staged_asset(b"payload", directory=staging_dir) as asset:
            assert asset.path is not None
            asset.path.unlink()
        assert list(staging_dir.iterdir()) == []
