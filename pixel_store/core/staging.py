"""Temporary staging of attachment payloads.

Attachments are handed to the store as local files. A staged file exists
only for the duration of the ``with`` block that created it.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pixel_store.core.record import Asset

logger = logging.getLogger(__name__)


@contextmanager
def staged_asset(
    data: bytes,
    *,
    suffix: str = "",
    directory: Path | str | None = None,
) -> Iterator[Asset]:
    """Write ``data`` to a temporary file and yield it as an Asset.

    The file is removed when the block exits, whether or not it raised.
    """
    fd, name = tempfile.mkstemp(suffix=suffix, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        logger.debug("Staged %d bytes at %s", len(data), path)
        yield Asset(path=path)
    finally:
        path.unlink(missing_ok=True)
