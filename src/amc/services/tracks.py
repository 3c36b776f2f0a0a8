"""Track management service."""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from amc.db.models import Track as TrackModel
from amc.db.models import TrackItem as TrackItemModel
from amc.db.models import TrackProgress, utcnow
from amc.exceptions import TrackNotFound, ValidationError
from amc.schemas.tracks import Track, TrackCreate, TrackItemIn, TrackUpdate
from amc.services.assembler import TrackAssembler
from amc.services.content import ContentResolver

logger = logging.getLogger(__name__)


class TrackService:
    """Service for managing tracks and their ordered items."""

    def __init__(self, db: AsyncSession, resolver: Optional[ContentResolver] = None):
        self.db = db
        self.assembler = TrackAssembler(db, resolver=resolver)

    async def create_track(self, data: TrackCreate) -> Track:
        """Create a track and its items.

        Item references are stored as given; they are not checked against
        the content stores and the returned items carry no details.
        """
        track = TrackModel(
            title=self._clean_title(data.title),
            description=self._clean_description(data.description),
            published=data.published,
        )
        self.db.add(track)
        await self.db.flush()

        if data.items:
            await self._insert_items(track.id, data.items)

        await self.db.commit()
        items = await self._load_items(track.id)
        logger.info("Created track %s with %d items", track.id, len(items))
        return await self.assembler.assemble(track, items, resolve=False)

    async def get_track(self, track_id: int, user_id: Optional[int] = None) -> Track:
        """Get an assembled track, with completion state when ``user_id`` is given."""
        track = await self.get_track_model(track_id)
        items = await self._load_items(track_id)
        return await self.assembler.assemble(track, items, user_id=user_id)

    async def list_tracks(self, published_only: bool = False) -> List[Track]:
        """List assembled tracks, newest first."""
        query = select(TrackModel)
        if published_only:
            query = query.where(TrackModel.published.is_(True))

        result = await self.db.execute(
            query.order_by(TrackModel.created_at.desc(), TrackModel.id.desc())
        )
        tracks = []
        for track in result.scalars().all():
            items = await self._load_items(track.id)
            tracks.append(await self.assembler.assemble(track, items))
        return tracks

    async def update_track(self, track_id: int, data: TrackUpdate) -> Track:
        """Update supplied fields; a supplied item list replaces every item.

        The replacement happens in the same transaction as the field changes.
        Progress recorded against replaced items is removed with them.
        """
        track = await self.get_track_model(track_id)
        changes = data.model_dump(exclude_unset=True, exclude={"items"})

        if "title" in changes:
            track.title = self._clean_title(changes["title"])
        if "description" in changes:
            track.description = self._clean_description(changes["description"])
        if changes.get("published") is not None:
            track.published = changes["published"]
        track.updated_at = utcnow()

        if data.items is not None:
            await self._delete_items(track_id)
            await self._insert_items(track_id, data.items)

        await self.db.commit()
        items = await self._load_items(track_id)
        logger.info("Updated track %s (%d items)", track_id, len(items))
        return await self.assembler.assemble(track, items)

    async def delete_track(self, track_id: int) -> None:
        """Delete a track together with its items and their progress."""
        await self.get_track_model(track_id)
        await self._delete_items(track_id)
        await self.db.execute(
            delete(TrackModel)
            .where(TrackModel.id == track_id)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        logger.info("Deleted track %s", track_id)

    async def get_track_model(self, track_id: int) -> TrackModel:
        track = await self.db.get(TrackModel, track_id)
        if track is None:
            raise TrackNotFound(track_id)
        return track

    async def _load_items(self, track_id: int) -> List[TrackItemModel]:
        result = await self.db.execute(
            select(TrackItemModel)
            .where(TrackItemModel.track_id == track_id)
            .order_by(TrackItemModel.order.asc(), TrackItemModel.id.asc())
        )
        return list(result.scalars().all())

    async def _insert_items(self, track_id: int, items: Sequence[TrackItemIn]) -> None:
        for index, entry in enumerate(items):
            self.db.add(
                TrackItemModel(
                    track_id=track_id,
                    type=entry.type.value,
                    item_id=entry.item_id,
                    order=entry.order if entry.order is not None else index,
                )
            )
        await self.db.flush()

    async def _delete_items(self, track_id: int) -> None:
        item_ids = select(TrackItemModel.id).where(TrackItemModel.track_id == track_id)
        await self.db.execute(
            delete(TrackProgress)
            .where(TrackProgress.track_item_id.in_(item_ids))
            .execution_options(synchronize_session="fetch")
        )
        await self.db.execute(
            delete(TrackItemModel)
            .where(TrackItemModel.track_id == track_id)
            .execution_options(synchronize_session="fetch")
        )

    @staticmethod
    def _clean_title(title: Optional[str]) -> str:
        if not title or not title.strip():
            raise ValidationError("Track title is required")
        return title.strip()

    @staticmethod
    def _clean_description(description: Optional[str]) -> Optional[str]:
        if not description or not description.strip():
            return None
        return description
