"""Resolution of track item references to content summaries."""

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from amc.models import Article, ContentType, Lesson, Tool
from amc.schemas.content import ArticleSummary, LessonSummary, ToolSummary

logger = logging.getLogger(__name__)

Summary = Dict[str, Any]
Lookup = Callable[[int], Awaitable[Optional[Summary]]]

# Content store table and summary shape per content type
STORES = {
    ContentType.article: (Article, ArticleSummary),
    ContentType.lesson: (Lesson, LessonSummary),
    ContentType.tool: (Tool, ToolSummary),
}


class ContentResolver:
    """Resolve ``(type, item_id)`` pairs against the article, lesson and tool stores.

    Lookups can be overridden per content type, e.g. to read a store that
    lives behind another service.
    """

    def __init__(
        self,
        db: AsyncSession,
        lookups: Optional[Mapping[ContentType, Lookup]] = None,
    ):
        self.db = db
        self.lookups: Dict[ContentType, Lookup] = {
            content_type: self._store_lookup(model, schema)
            for content_type, (model, schema) in STORES.items()
        }
        if lookups:
            self.lookups.update(lookups)

    def _store_lookup(self, model, schema) -> Lookup:
        async def lookup(item_id: int) -> Optional[Summary]:
            row = await self.db.get(model, item_id)
            if row is None:
                return None
            return schema.model_validate(row).model_dump()

        return lookup

    async def resolve(
        self, content_type: Union[ContentType, str], item_id: int
    ) -> Optional[Summary]:
        """Return the content summary, or None when it cannot be resolved.

        Unknown types, missing rows and store failures all yield None so that
        one bad reference never affects its siblings. Each lookup runs in a
        SAVEPOINT on the request session.
        """
        try:
            kind = ContentType(content_type)
        except ValueError:
            logger.warning("Unknown content type %r for item %s", content_type, item_id)
            return None

        lookup = self.lookups.get(kind)
        if lookup is None:
            return None

        try:
            async with self.db.begin_nested():
                return await lookup(item_id)
        except Exception:
            logger.warning(
                "Failed to resolve %s %s", kind.value, item_id, exc_info=True
            )
            return None
