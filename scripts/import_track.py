"""Import a track definition from a JSON file into the local DB.

Usage: python scripts/import_track.py path/to/track.json

The file holds ``title``, ``description``, ``published`` and an ``items``
list of ``{"type": "article" | "lesson" | "tool", "item_id": int}``.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy import select

from amc.db import base
from amc.db.models import Track
from amc.models import Article, ContentType, Lesson, Tool
from amc.schemas.tracks import Track as TrackSchema
from amc.schemas.tracks import TrackCreate
from amc.services.tracks import TrackService

STORE_MODELS = {
    ContentType.article: Article,
    ContentType.lesson: Lesson,
    ContentType.tool: Tool,
}


def load_definition(path: Path) -> TrackCreate:
    """Read and validate a track definition file."""
    with open(path, "r") as f:
        return TrackCreate.model_validate(json.load(f))


async def find_missing_content(session, definition: TrackCreate) -> List[Dict[str, Any]]:
    """List item references that do not exist in their content store."""
    missing = []
    for item in definition.items or []:
        row = await session.get(STORE_MODELS[item.type], item.item_id)
        if row is None:
            missing.append({"type": item.type.value, "item_id": item.item_id})
    return missing


async def import_track(path: Path) -> TrackSchema:
    """Create the track described by ``path`` unless one with its title exists."""
    if base.engine is None:
        await base.init_db()

    definition = load_definition(path)

    async with base.AsyncSessionLocal() as session:
        service = TrackService(session)

        existing = await session.execute(
            select(Track.id).where(Track.title == (definition.title or "").strip())
        )
        track_id = existing.scalars().first()
        if track_id is not None:
            print(f"✅ Track '{definition.title}' already exists (id={track_id})")
            return await service.get_track(track_id)

        missing = await find_missing_content(session, definition)
        for ref in missing:
            print(f"⚠️  {ref['type']} {ref['item_id']} not found; it will show as unavailable")

        track = await service.create_track(definition)
        print(f"✅ Imported track '{track.title}' (id={track.id}, {len(track.items)} items)")
        return track


def main() -> None:
    """Main entry point for track import."""
    if len(sys.argv) != 2:
        print("Usage: python scripts/import_track.py <track.json>")
        sys.exit(2)

    track = asyncio.run(import_track(Path(sys.argv[1])))
    print(f"Track accessible at: /v1/tracks/{track.id}")


if __name__ == "__main__":
    main()
