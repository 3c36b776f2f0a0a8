import pytest
from sqlalchemy import event, text
from amc.models import ContentType
from amc.services.content import ContentResolver


@pytest.mark.asyncio
async def test_resolves_each_content_type(db_session, content):
    resolver = ContentResolver(db_session)

    article = await resolver.resolve(ContentType.article, content["article"].id)
    assert article["title"] == "Attachment Placement Basics"
    assert article["slug"] == "attachment-placement-basics"

    lesson = await resolver.resolve("lesson", content["lesson"].id)
    assert lesson["duration"] == "18 min"

    tool = await resolver.resolve("tool", content["tool"].id)
    assert tool["category"] == "Templates"
    assert tool["file_url"] == "/uploads/tools/checklist.pdf"


@pytest.mark.asyncio
async def test_missing_row_resolves_to_none(db_session, content):
    resolver = ContentResolver(db_session)
    assert await resolver.resolve("article", 9999) is None


@pytest.mark.asyncio
async def test_unknown_type_resolves_to_none(db_session):
    resolver = ContentResolver(db_session)
    assert await resolver.resolve("podcast", 1) is None


@pytest.mark.asyncio
async def test_store_failure_resolves_to_none(db_session):
    async def broken_lookup(item_id):
        raise RuntimeError("tools store unreachable")

    resolver = ContentResolver(db_session, lookups={ContentType.tool: broken_lookup})
    assert await resolver.resolve("tool", 1) is None


@pytest.mark.asyncio
async def test_failed_query_is_rolled_back_to_its_savepoint(
    db_session, test_engine, content
):
    rolled_back = []

    def on_rollback_savepoint(conn, name, context):
        rolled_back.append(name)

    event.listen(test_engine.sync_engine, "rollback_savepoint", on_rollback_savepoint)

    async with test_engine.begin() as conn:
        await conn.execute(text("DROP TABLE tools"))
    db_session.expunge_all()

    resolver = ContentResolver(db_session)
    assert await resolver.resolve("tool", content["tool"].id) is None
    assert len(rolled_back) == 1

    # The session keeps serving the other stores
    lesson = await resolver.resolve("lesson", content["lesson"].id)
    assert lesson["title"] == "Case Selection"
    article = await resolver.resolve("article", content["article"].id)
    assert article["slug"] == "attachment-placement-basics"

    event.remove(test_engine.sync_engine, "rollback_savepoint", on_rollback_savepoint)
