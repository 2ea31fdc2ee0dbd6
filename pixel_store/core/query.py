"""Query descriptions and continuation cursors.

A Query names a record type, a conjunction of equality predicates, sort
descriptors and an optional field projection. Adapters return results one
page at a time; the page carries a Cursor when more results remain. A
cursor is self-contained: continuing a query needs only the cursor.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any

from pixel_store.core.exceptions import CursorError
from pixel_store.core.record import Record

# Sort key that refers to the store-managed creation timestamp.
CREATION_DATE = "creationDate"


@dataclass(frozen=True)
class SortDescriptor:
    """Sort on a record field (or ``creationDate``)."""

    key: str
    ascending: bool = True


@dataclass(frozen=True)
class Query:
    """Predicate query against one record type."""

    record_type: str
    filters: dict[str, Any] = field(default_factory=dict)
    sort: tuple[SortDescriptor, ...] = ()
    desired_keys: tuple[str, ...] | None = None
    results_limit: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_type": self.record_type,
            "filters": self.filters,
            "sort": [[s.key, s.ascending] for s in self.sort],
            "desired_keys": list(self.desired_keys) if self.desired_keys is not None else None,
            "results_limit": self.results_limit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Query:
        desired = data.get("desired_keys")
        return cls(
            record_type=data["record_type"],
            filters=dict(data.get("filters") or {}),
            sort=tuple(SortDescriptor(key, bool(asc)) for key, asc in data.get("sort") or []),
            desired_keys=tuple(desired) if desired is not None else None,
            results_limit=data.get("results_limit"),
        )


@dataclass(frozen=True)
class Cursor:
    """Opaque continuation token for a paginated query."""

    token: str


@dataclass
class QueryPage:
    """One page of query results."""

    records: list[Record]
    cursor: Cursor | None = None

    @property
    def has_more(self) -> bool:
        return self.cursor is not None


def encode_cursor(query: Query, offset: int) -> Cursor:
    """Pack a query and the offset of the next page into a cursor."""
    payload = json.dumps({"q": query.to_dict(), "o": offset}, separators=(",", ":"))
    return Cursor(base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii"))


def decode_cursor(cursor: Cursor) -> tuple[Query, int]:
    """Unpack a cursor produced by encode_cursor.

    Raises:
        CursorError: If the token is not a valid cursor.
    """
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.token.encode("ascii")))
        return Query.from_dict(payload["q"]), int(payload["o"])
    except (binascii.Error, ValueError, KeyError, TypeError) as e:
        raise CursorError(f"Invalid cursor token: {e}") from e
