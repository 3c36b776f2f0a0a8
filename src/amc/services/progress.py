"""Per-user completion state of track items."""

import logging
from typing import Iterable, Optional, Set

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from amc.db.models import TrackItem, TrackProgress, utcnow
from amc.exceptions import DependencyError, TrackItemNotFound, ValidationError

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProgressService:
    """Store of completion flags keyed by ``(user_id, track_item_id)``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_item(
        self, track_item_id: int, track_id: Optional[int] = None
    ) -> Optional[TrackItem]:
        """Get a track item, optionally requiring it to belong to ``track_id``."""
        query = select(TrackItem).where(TrackItem.id == track_item_id)
        if track_id is not None:
            query = query.where(TrackItem.track_id == track_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def mark_complete(
        self,
        user_id: Optional[int],
        track_item_id: int,
        track_id: Optional[int] = None,
    ) -> None:
        """Mark a track item completed for a user.

        Calling it again refreshes ``completed_at``; there is never more
        than one row per user and item.
        """
        self._require_user(user_id)
        item = await self.get_item(track_item_id, track_id)
        if item is None:
            raise TrackItemNotFound(track_item_id)

        await self._upsert(user_id, track_item_id, completed=True)
        logger.info("User %s completed track item %s", user_id, track_item_id)

    async def mark_incomplete(
        self,
        user_id: Optional[int],
        track_item_id: int,
        track_id: Optional[int] = None,
    ) -> bool:
        """Clear the completion flag. Returns False when the item does not exist."""
        self._require_user(user_id)
        item = await self.get_item(track_item_id, track_id)
        if item is None:
            logger.debug("Ignoring uncomplete of unknown track item %s", track_item_id)
            return False

        await self._upsert(user_id, track_item_id, completed=False)
        logger.info("User %s reopened track item %s", user_id, track_item_id)
        return True

    async def completed_item_ids(
        self, user_id: int, track_item_ids: Iterable[int]
    ) -> Set[int]:
        """Ids among ``track_item_ids`` the user has completed."""
        ids = list(track_item_ids)
        if not ids:
            return set()

        result = await self.db.execute(
            select(TrackProgress.track_item_id).where(
                TrackProgress.user_id == user_id,
                TrackProgress.completed.is_(True),
                TrackProgress.track_item_id.in_(ids),
            )
        )
        return set(result.scalars().all())

    async def get_record(
        self, user_id: int, track_item_id: int
    ) -> Optional[TrackProgress]:
        # Upserts bypass the identity map, so always refresh from the row
        result = await self.db.execute(
            select(TrackProgress)
            .where(
                TrackProgress.user_id == user_id,
                TrackProgress.track_item_id == track_item_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def _require_user(self, user_id: Optional[int]) -> None:
        if user_id is None:
            raise ValidationError("user_id is required")

    async def _upsert(self, user_id: int, track_item_id: int, completed: bool) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise DependencyError(f"Progress upsert is not supported on {dialect}")

        now = utcnow()
        values = {
            "completed": completed,
            "completed_at": now if completed else None,
            "updated_at": now,
        }
        stmt = insert(TrackProgress).values(
            user_id=user_id, track_item_id=track_item_id, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "track_item_id"],
            set_=values,
        )
        await self.db.execute(stmt)
        await self.db.commit()
