import pytest
from amc.db.models import Track, TrackItem, TrackProgress
from amc.exceptions import TrackNotFound, ValidationError
from amc.schemas.tracks import TrackCreate, TrackItemIn, TrackUpdate
from amc.services.progress import ProgressService
from amc.services.tracks import TrackService
from sqlalchemy import func, select, text


def refs(*pairs):
    return [TrackItemIn(type=kind, item_id=item_id) for kind, item_id in pairs]


@pytest.mark.asyncio
async def test_create_assigns_positional_order(db_session):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(
            title="  Aligner Onboarding  ",
            description="",
            items=refs(("article", 5), ("lesson", 9), ("tool", 2)),
        )
    )

    assert track.title == "Aligner Onboarding"
    assert track.description is None
    assert track.published is False
    assert [item.order for item in track.items] == [0, 1, 2]
    assert [item.type for item in track.items] == ["article", "lesson", "tool"]
    # Creation does not look at the content stores
    assert all(item.details is None for item in track.items)

    fetched = await service.get_track(track.id)
    assert [(item.type, item.item_id) for item in fetched.items] == [
        ("article", 5),
        ("lesson", 9),
        ("tool", 2),
    ]


@pytest.mark.asyncio
async def test_explicit_order_wins_over_position(db_session):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(
            title="Reordered",
            items=[
                TrackItemIn(type="tool", item_id=1, order=2),
                TrackItemIn(type="article", item_id=1, order=0),
                TrackItemIn(type="lesson", item_id=1, order=1),
            ],
        )
    )

    fetched = await service.get_track(track.id)
    assert [item.type for item in fetched.items] == ["article", "lesson", "tool"]


@pytest.mark.asyncio
@pytest.mark.parametrize("title", [None, "", "   "])
async def test_create_requires_title(db_session, title):
    service = TrackService(db_session)
    with pytest.raises(ValidationError):
        await service.create_track(TrackCreate(title=title))

    count = await db_session.scalar(select(func.count()).select_from(Track))
    assert count == 0


@pytest.mark.asyncio
async def test_missing_content_only_affects_its_item(db_session, content):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(
            title="Partly broken",
            items=refs(
                ("article", content["article"].id),
                ("lesson", 404),
                ("tool", content["tool"].id),
            ),
        )
    )

    fetched = await service.get_track(track.id)
    assert len(fetched.items) == 3
    assert fetched.items[0].details["title"] == "Attachment Placement Basics"
    assert fetched.items[1].details is None
    assert fetched.items[2].details["title"] == "Consultation Checklist"


@pytest.mark.asyncio
async def test_get_unknown_track_raises(db_session):
    service = TrackService(db_session)
    with pytest.raises(TrackNotFound):
        await service.get_track(12345)


@pytest.mark.asyncio
async def test_get_without_user_has_no_completion(db_session, track_with_items):
    service = TrackService(db_session)
    track = await service.get_track(track_with_items.id)

    assert [item.completed for item in track.items] == [False, False, False]
    assert [item.unlocked for item in track.items] == [True, False, False]
    assert track.progress is None


@pytest.mark.asyncio
async def test_get_with_user_reports_progress(
    db_session, track_with_items, test_user_id
):
    service = TrackService(db_session)
    before = await service.get_track(track_with_items.id, user_id=test_user_id)
    first_item_id = before.items[0].id

    await ProgressService(db_session).mark_complete(test_user_id, first_item_id)

    track = await service.get_track(track_with_items.id, user_id=test_user_id)
    assert [item.completed for item in track.items] == [True, False, False]
    assert [item.unlocked for item in track.items] == [True, True, False]
    assert track.progress.completed == 1
    assert track.progress.total == 3
    assert track.progress.percent == 33
    assert track.progress.next_item_id == track.items[1].id


@pytest.mark.asyncio
async def test_list_filters_published_and_orders_newest_first(db_session):
    service = TrackService(db_session)
    draft = await service.create_track(TrackCreate(title="Draft", published=False))
    first = await service.create_track(TrackCreate(title="First", published=True))
    second = await service.create_track(TrackCreate(title="Second", published=True))

    everything = await service.list_tracks()
    assert [t.id for t in everything] == [second.id, first.id, draft.id]

    published = await service.list_tracks(published_only=True)
    assert [t.id for t in published] == [second.id, first.id]


@pytest.mark.asyncio
async def test_list_resolves_items_without_completion(
    db_session, track_with_items, test_user_id
):
    items = (
        await db_session.execute(
            select(TrackItem).where(TrackItem.track_id == track_with_items.id)
        )
    ).scalars().all()
    await ProgressService(db_session).mark_complete(test_user_id, items[0].id)

    service = TrackService(db_session)
    [track] = await service.list_tracks()
    assert all(item.details is not None for item in track.items)
    assert all(item.completed is False for item in track.items)


@pytest.mark.asyncio
async def test_update_scalar_fields_keeps_items(db_session):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(title="Old", description="keep me", items=refs(("lesson", 1)))
    )

    updated = await service.update_track(
        track.id, TrackUpdate(title="New", published=True)
    )
    assert updated.title == "New"
    assert updated.description == "keep me"
    assert updated.published is True
    assert updated.updated_at >= track.updated_at
    assert [item.id for item in updated.items] == [item.id for item in track.items]


@pytest.mark.asyncio
async def test_update_rejects_blank_title(db_session):
    service = TrackService(db_session)
    track = await service.create_track(TrackCreate(title="Named"))
    with pytest.raises(ValidationError):
        await service.update_track(track.id, TrackUpdate(title=" "))


@pytest.mark.asyncio
async def test_update_items_replaces_everything(db_session, test_user_id):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(title="Replace me", items=refs(("article", 1), ("lesson", 2)))
    )
    old_ids = [item.id for item in track.items]
    await ProgressService(db_session).mark_complete(test_user_id, old_ids[0])

    updated = await service.update_track(
        track.id, TrackUpdate(items=refs(("tool", 3)))
    )
    assert [(item.type, item.item_id, item.order) for item in updated.items] == [
        ("tool", 3, 0)
    ]

    fetched = await service.get_track(track.id, user_id=test_user_id)
    assert [(item.type, item.item_id) for item in fetched.items] == [("tool", 3)]
    assert fetched.items[0].completed is False

    leftovers = await db_session.scalar(
        select(func.count())
        .select_from(TrackProgress)
        .where(TrackProgress.track_item_id.in_(old_ids))
    )
    assert leftovers == 0


@pytest.mark.asyncio
async def test_update_with_empty_items_clears_track(db_session):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(title="Shrinking", items=refs(("article", 1)))
    )

    updated = await service.update_track(track.id, TrackUpdate(items=[]))
    assert updated.items == []


@pytest.mark.asyncio
async def test_update_unknown_track_raises(db_session):
    service = TrackService(db_session)
    with pytest.raises(TrackNotFound):
        await service.update_track(999, TrackUpdate(title="Ghost"))


@pytest.mark.asyncio
async def test_delete_cascades_items_and_progress(db_session, test_user_id):
    service = TrackService(db_session)
    track = await service.create_track(
        TrackCreate(title="Short lived", items=refs(("article", 1), ("tool", 1)))
    )
    await ProgressService(db_session).mark_complete(test_user_id, track.items[0].id)

    await service.delete_track(track.id)

    with pytest.raises(TrackNotFound):
        await service.get_track(track.id)
    remaining_items = await db_session.scalar(
        select(func.count())
        .select_from(TrackItem)
        .where(TrackItem.track_id == track.id)
    )
    remaining_progress = await db_session.scalar(
        select(func.count()).select_from(TrackProgress)
    )
    assert remaining_items == 0
    assert remaining_progress == 0


@pytest.mark.asyncio
async def test_delete_unknown_track_raises(db_session):
    service = TrackService(db_session)
    with pytest.raises(TrackNotFound):
        await service.delete_track(999)


@pytest.mark.asyncio
async def test_list_survives_a_missing_content_table(
    db_session, test_engine, content, track_with_items
):
    second = Track(title="Chairside Tools", published=True)
    db_session.add(second)
    await db_session.flush()
    db_session.add_all(
        [
            TrackItem(track_id=second.id, type="tool", item_id=content["tool"].id, order=0),
            TrackItem(
                track_id=second.id, type="lesson", item_id=content["lesson"].id, order=1
            ),
        ]
    )
    await db_session.commit()

    async with test_engine.begin() as conn:
        await conn.execute(text("DROP TABLE tools"))
    db_session.expunge_all()

    tracks = await TrackService(db_session).list_tracks()

    assert [track.title for track in tracks] == ["Chairside Tools", "Aligner Onboarding"]
    details = [[item.details is not None for item in track.items] for track in tracks]
    assert details == [[False, True], [True, True, False]]
