"""Composition of tracks, resolved content and learner progress."""

from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from amc.db.models import Track as TrackModel
from amc.db.models import TrackItem as TrackItemModel
from amc.schemas.tracks import Track, TrackItem
from amc.services.content import ContentResolver
from amc.services.gating import compute_unlocked, summarize_progress
from amc.services.progress import ProgressService


class TrackAssembler:
    """Build the track aggregate returned to clients."""

    def __init__(
        self,
        db: AsyncSession,
        resolver: Optional[ContentResolver] = None,
        progress: Optional[ProgressService] = None,
    ):
        self.db = db
        self.resolver = resolver or ContentResolver(db)
        self.progress = progress or ProgressService(db)

    async def assemble(
        self,
        track: TrackModel,
        items: Sequence[TrackItemModel],
        user_id: Optional[int] = None,
        resolve: bool = True,
    ) -> Track:
        """Attach content details, completion and unlock flags to ``items``.

        ``items`` are expected in display order and are returned in the same
        order. Completion is only looked up when ``user_id`` is given.
        """
        completed_ids: set[int] = set()
        if user_id is not None:
            completed_ids = await self.progress.completed_item_ids(
                user_id, [item.id for item in items]
            )

        assembled = []
        for item in items:
            details = None
            if resolve:
                details = await self.resolver.resolve(item.type, item.item_id)
            assembled.append(
                TrackItem(
                    id=item.id,
                    track_id=item.track_id,
                    type=item.type,
                    item_id=item.item_id,
                    order=item.order,
                    details=details,
                    completed=item.id in completed_ids,
                )
            )

        for entry, unlocked in zip(assembled, compute_unlocked(assembled)):
            entry.unlocked = unlocked

        return Track(
            id=track.id,
            title=track.title,
            description=track.description,
            published=track.published,
            created_at=track.created_at,
            updated_at=track.updated_at,
            items=assembled,
            progress=summarize_progress(assembled) if user_id is not None else None,
        )
