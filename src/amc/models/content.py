"""Read models for the portal's content stores.

The ``articles``, ``lessons`` and ``tools`` tables belong to the portal's
library, academy and tools modules. This service only reads them to build
summaries for track items.
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from amc.db.base import Base
from amc.db.models import utcnow


class ContentType(str, enum.Enum):
    """Kinds of content a track item can point at."""

    article = "article"
    lesson = "lesson"
    tool = "tool"


class Article(Base):
    """Library article (PDF)."""

    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    file_url = Column(Text, nullable=True)
    published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Lesson(Base):
    """Academy lesson."""

    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    duration = Column(String(50), nullable=True)
    module = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    order = Column(Integer, nullable=True, default=0)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Tool(Base):
    """Downloadable practice tool (template, checklist, ...)."""

    __tablename__ = "tools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    icon = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    file_url = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
