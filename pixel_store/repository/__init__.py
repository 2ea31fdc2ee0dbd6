"""Repository layer - per record kind data access."""

from __future__ import annotations

from pixel_store.repository.artwork import ArtworkRepository
from pixel_store.repository.base import Repository
from pixel_store.repository.completed import CompletedRepository
from pixel_store.repository.progress import ProgressRepository

__all__ = [
    "Repository",
    "ArtworkRepository",
    "ProgressRepository",
    "CompletedRepository",
]
