"""SQLAlchemy read models for the portal content stores."""

from .content import Article, ContentType, Lesson, Tool

__all__ = [
    "Article",
    "ContentType",
    "Lesson",
    "Tool",
]
