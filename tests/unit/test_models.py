"""Unit tests for domain models."""

from __future__ import annotations

import json
import uuid

import pytest
from pydantic import ValidationError

from pixel_store.models import Artwork


class TestArtwork:
    def test_json_document_keys(self, cat: Artwork) -> None:
        document = json.loads(cat.to_json())
        assert set(document) == {"id", "width", "height", "pixels", "numbers", "title", "author"}
        assert document["numbers"] is None

    def test_from_json(self, cat: Artwork) -> None:
        assert Artwork.from_json(cat.to_json()) == cat
        assert Artwork.from_json(cat.to_json().encode("utf-8")) == cat

    def test_pixels_row_count_must_match_height(self) -> None:
        with pytest.raises(ValidationError, match="expected 2"):
            Artwork(id=uuid.uuid4(), width=2, height=2, pixels=[["a", "b"]])

    def test_pixels_row_width_must_match(self) -> None:
        with pytest.raises(ValidationError, match="row 1"):
            Artwork(id=uuid.uuid4(), width=2, height=2, pixels=[["a", "b"], ["c"]])

    def test_numbers_must_match_dimensions(self) -> None:
        with pytest.raises(ValidationError, match="numbers"):
            Artwork(
                id=uuid.uuid4(),
                width=1,
                height=2,
                pixels=[["a"], ["b"]],
                numbers=[[1]],
            )

    def test_dimensions_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Artwork(id=uuid.uuid4(), width=0, height=0, pixels=[])

    def test_strict_document_decoding(self, cat: Artwork) -> None:
        document = json.loads(cat.to_json())
        document["width"] = "2"
        with pytest.raises(ValidationError):
            Artwork.from_json(json.dumps(document))
