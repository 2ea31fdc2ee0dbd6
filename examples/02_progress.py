"""
Example 02: Progress and Completed Exports

This example tracks painting progress for an artwork, then stores the
finished result with a rendered image.
"""

import asyncio
import json
import uuid

from pixel_store import Artwork, PixelArtStore, StoreConfig


async def main():
    config = StoreConfig(driver="memory")
    artwork = Artwork(
        id=uuid.uuid4(),
        width=2,
        height=1,
        pixels=[["0xff0000ff", "0x00ff00ff"]],
        title="Two dots",
    )

    async with PixelArtStore.from_config(config) as store:
        await store.save_artwork(artwork)
        art_id = str(artwork.id)

        print("=== Progress ===\n")
        progress = await store.save_progress(art_id, json.dumps({"filled": [0]}), 50.0)
        print(f"   Saved {progress.ref} at {progress.percent_complete}%")

        progress = await store.update_progress(progress.ref, json.dumps({"filled": [0, 1]}), 100.0)
        print(f"   Updated {progress.ref} to {progress.percent_complete}%")

        for entry in await store.list_progress(art_id):
            print(f"   - {entry.ref}: {entry.pixels_partial_json}")

        print("\n=== Completed ===\n")
        completed = await store.save_completed(art_id, artwork, b"\x89PNG...")
        print(f"   Saved {completed.ref} at {completed.completed_at:%Y-%m-%d %H:%M}")
        print(f"   Stored artwork title: {completed.artwork().title}")


if __name__ == "__main__":
    asyncio.run(main())
