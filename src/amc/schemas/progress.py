"""Schemas for marking track items complete."""

from typing import Optional

from pydantic import BaseModel


class ProgressUpdate(BaseModel):
    """Complete/uncomplete request body."""

    user_id: Optional[int] = None


class ProgressAck(BaseModel):
    """Confirmation of a progress change."""

    success: bool = True
    message: str
    track_item_id: int
    completed: bool
