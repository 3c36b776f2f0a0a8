"""Track-related schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from amc.models import ContentType


class TrackItemIn(BaseModel):
    """Reference to a piece of content when creating or replacing items."""

    type: ContentType
    item_id: int
    order: Optional[int] = Field(default=None, ge=0)


class TrackCreate(BaseModel):
    """Create track request.

    ``title`` is optional here so that an absent title is reported the same
    way as an empty one.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    published: bool = False
    items: Optional[List[TrackItemIn]] = None


class TrackUpdate(BaseModel):
    """Partial track update. A supplied ``items`` list replaces all items."""

    title: Optional[str] = None
    description: Optional[str] = None
    published: Optional[bool] = None
    items: Optional[List[TrackItemIn]] = None


class TrackItem(BaseModel):
    """Track item with resolved content and learner state."""

    id: int
    track_id: int
    type: str
    item_id: int
    order: int
    details: Optional[Dict[str, Any]] = None
    completed: bool = False
    unlocked: bool = True

    class Config:
        from_attributes = True


class TrackProgress(BaseModel):
    """Completion summary of a track for one user."""

    total: int
    completed: int
    percent: int
    next_item_id: Optional[int] = None


class Track(BaseModel):
    """Assembled track aggregate."""

    id: int
    title: str
    description: Optional[str] = None
    published: bool
    created_at: datetime
    updated_at: datetime
    items: List[TrackItem] = []
    progress: Optional[TrackProgress] = None

    class Config:
        from_attributes = True


class TrackList(BaseModel):
    """List of tracks."""

    items: List[Track]
