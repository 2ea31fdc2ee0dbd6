"""
Example 01: Artworks

This example saves a few artworks to a SQLite store and reads them back.
"""

import asyncio
import tempfile
import uuid
from pathlib import Path

from pixel_store import Artwork, PixelArtStore, StoreConfig


def checkerboard(size: int, title: str) -> Artwork:
    colors = ["0xffffffff", "0x000000ff"]
    return Artwork(
        id=uuid.uuid4(),
        width=size,
        height=size,
        pixels=[[colors[(x + y) % 2] for x in range(size)] for y in range(size)],
        title=title,
    )


async def main():
    db_path = Path(tempfile.mkdtemp()) / "pixels.db"
    config = StoreConfig(driver="sqlite", database=str(db_path), inline_json_limit=1024)

    async with PixelArtStore.from_config(config) as store:
        print("=== Saving artworks ===\n")
        small = checkerboard(2, "Cat")
        large = checkerboard(32, "Big board")
        for artwork in (small, large):
            ref = await store.save_artwork(artwork)
            print(f"   {artwork.title}: {ref}")

        print("\n=== Fetching all artworks ===\n")
        for artwork in await store.fetch_all_artworks():
            print(f"   - {artwork.title} ({artwork.width}x{artwork.height})")

        print("\n=== Fetching one artwork ===\n")
        fetched = await store.fetch_artwork(large.id)
        print(f"   Round trip equal: {fetched == large}")


if __name__ == "__main__":
    asyncio.run(main())
