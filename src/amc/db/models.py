"""SQLAlchemy ORM models for tracks and learner progress."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from amc.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Track(Base):
    """Curated, ordered sequence of articles, lessons and tools."""
    __tablename__ = "tracks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    items = relationship(
        "TrackItem",
        back_populates="track",
        order_by="TrackItem.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_tracks_published_created", "published", "created_at"),
    )


class TrackItem(Base):
    """One slot in a track, pointing at an article, lesson or tool."""
    __tablename__ = "track_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    track_id = Column(
        Integer, ForeignKey("tracks.id", ondelete="CASCADE"), nullable=False
    )
    type = Column(String(50), nullable=False)
    item_id = Column(Integer, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    track = relationship("Track", back_populates="items")
    progress = relationship(
        "TrackProgress",
        back_populates="track_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("type IN ('article', 'lesson', 'tool')", name="check_track_item_type"),
        Index("idx_track_items_track_order", "track_id", "order"),
    )


class TrackProgress(Base):
    """Per-user completion state of a single track item."""
    __tablename__ = "user_track_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    track_item_id = Column(
        Integer, ForeignKey("track_items.id", ondelete="CASCADE"), nullable=False
    )
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    track_item = relationship("TrackItem", back_populates="progress")

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "track_item_id",
            name="user_track_items_user_id_track_item_id_unique",
        ),
        Index("idx_user_track_items_user", "user_id", "completed"),
    )
