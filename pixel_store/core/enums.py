"""Store enumerations."""

from __future__ import annotations

from enum import Enum


class Database(Enum):
    """Record store databases.

    Artworks live in the shared public database; per-user progress and
    completed exports live in the private one.
    """

    PUBLIC = "public"
    PRIVATE = "private"


class RecordKind(Enum):
    """Record types known to the pixel-art store."""

    ART = "Art"
    PROGRESS = "Progress"
    COMPLETED = "Completed"
