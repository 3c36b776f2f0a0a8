"""Track management endpoints."""

from typing import Optional

from amc.db.base import get_db
from amc.schemas.common import Ack
from amc.schemas.progress import ProgressAck, ProgressUpdate
from amc.schemas.tracks import Track, TrackCreate, TrackList, TrackUpdate
from amc.services.progress import ProgressService
from amc.services.tracks import TrackService
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter()


@router.post("", response_model=Track, status_code=201)
async def create_track(
    payload: TrackCreate,
    db: AsyncSession = Depends(get_db),
) -> Track:
    """Create a track with its ordered items."""
    service = TrackService(db)
    return await service.create_track(payload)


@router.get("", response_model=TrackList)
async def list_tracks(
    published: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> TrackList:
    """List tracks; ``published=true`` restricts the list to published tracks."""
    service = TrackService(db)
    tracks = await service.list_tracks(published_only=published == "true")
    return TrackList(items=tracks)


@router.get("/{track_id}", response_model=Track)
async def get_track(
    track_id: int,
    user_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> Track:
    """Get a track, with the user's completion state when ``user_id`` is given."""
    service = TrackService(db)
    return await service.get_track(track_id, user_id=user_id)


@router.put("/{track_id}", response_model=Track)
async def update_track(
    track_id: int,
    payload: TrackUpdate,
    db: AsyncSession = Depends(get_db),
) -> Track:
    """Update track fields and optionally replace its items."""
    service = TrackService(db)
    return await service.update_track(track_id, payload)


@router.delete("/{track_id}", response_model=Ack)
async def delete_track(
    track_id: int,
    db: AsyncSession = Depends(get_db),
) -> Ack:
    """Delete a track and everything attached to it."""
    service = TrackService(db)
    await service.delete_track(track_id)
    return Ack(message="Track deleted")


@router.post("/{track_id}/items/{item_id}/complete", response_model=ProgressAck)
async def complete_item(
    track_id: int,
    item_id: int,
    payload: Optional[ProgressUpdate] = None,
    db: AsyncSession = Depends(get_db),
) -> ProgressAck:
    """Mark a track item completed for a user."""
    service = ProgressService(db)
    await service.mark_complete(
        payload.user_id if payload else None, item_id, track_id=track_id
    )
    return ProgressAck(
        message="Item marked as completed", track_item_id=item_id, completed=True
    )


@router.post("/{track_id}/items/{item_id}/uncomplete", response_model=ProgressAck)
async def uncomplete_item(
    track_id: int,
    item_id: int,
    payload: Optional[ProgressUpdate] = None,
    db: AsyncSession = Depends(get_db),
) -> ProgressAck:
    """Clear a track item's completion for a user."""
    service = ProgressService(db)
    await service.mark_incomplete(
        payload.user_id if payload else None, item_id, track_id=track_id
    )
    return ProgressAck(
        message="Item marked as not completed", track_item_id=item_id, completed=False
    )
