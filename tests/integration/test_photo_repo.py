"""Photo repository integration tests on SQLite (db_session); a PostgreSQL smoke
test runs when TEST_POSTGRES_URL is set."""

from datetime import timedelta

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from app.application.dtos.photo import PhotoCreate, PhotoFilter, PhotoUpdate
from app.infrastructure.persistence.models.photo import Photo, PhotoTag
from app.infrastructure.persistence.repositories import PhotoRepository
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid


def _create(**overrides) -> PhotoCreate:
    values = {
        "id": generate_cuid(),
        "title": "A",
        "description": "B",
        "object_key": f"photos/{generate_cuid()}.jpg",
        "tags": frozenset(),
    }
    values.update(overrides)
    return PhotoCreate(**values)


async def _seed(repo: PhotoRepository, *items: PhotoCreate) -> list[str]:
    """Create items oldest-first with distinct created_at values, then commit."""
    base = utc_now()
    ids = []
    for i, item in enumerate(items):
        created = await repo.create_photo(item)
        await repo.db.execute(
            update(Photo)
            .where(Photo.id == created.id)
            .values(created_at=base + timedelta(seconds=i))
        )
        ids.append(created.id)
    await repo.commit()
    return ids


async def test_create_and_get(db_session) -> None:
    repo = PhotoRepository(db_session)
    created = await repo.create_photo(
        _create(title="A", description="B", tags=frozenset({"y", "x"}), object_key="photos/abc.jpg")
    )
    await repo.commit()

    assert created.title == "A"
    assert created.tags == ["x", "y"]
    assert created.likes == 0
    assert created.created_at.tzinfo is not None

    found = await repo.get_by_id(created.id)
    assert found is not None
    assert found.object_key == "photos/abc.jpg"
    assert found.tags == ["x", "y"]
    assert (await repo.get_by_object_key("photos/abc.jpg")).id == created.id


async def test_missing_rows_return_none(db_session) -> None:
    repo = PhotoRepository(db_session)
    assert await repo.get_by_id("nope") is None
    assert await repo.get_by_object_key("photos/nope.jpg") is None
    assert await repo.update_photo("nope", PhotoUpdate(title="x")) is None
    assert await repo.delete_photo("nope") is False
    assert await repo.increment_likes("nope") is None


async def test_object_key_is_unique(db_session) -> None:
    repo = PhotoRepository(db_session)
    await repo.create_photo(_create(object_key="photos/same.jpg"))
    with pytest.raises(IntegrityError):
        await repo.create_photo(_create(object_key="photos/same.jpg"))
    await repo.rollback()


async def test_find_newest_first_with_paging(db_session) -> None:
    repo = PhotoRepository(db_session)
    ids = await _seed(repo, *(_create(title=f"t{i}") for i in range(5)))

    rows, total = await repo.find(PhotoFilter(), page=1, page_size=2)
    assert total == 5
    assert [r.id for r in rows] == [ids[4], ids[3]]

    rows, _ = await repo.find(PhotoFilter(), page=3, page_size=2)
    assert [r.id for r in rows] == [ids[0]]


async def test_search_is_case_insensitive_substring_on_title_or_description(db_session) -> None:
    repo = PhotoRepository(db_session)
    by_title, by_desc, _ = await _seed(
        repo,
        _create(title="Harbour SUNSET"),
        _create(title="Hills", description="after the sunset"),
        _create(title="Noon", description="bright"),
    )
    rows, total = await repo.find(PhotoFilter(search="sunset"), 1, 10)
    assert total == 2
    assert {r.id for r in rows} == {by_title, by_desc}


async def test_search_treats_wildcards_literally(db_session) -> None:
    repo = PhotoRepository(db_session)
    literal, _ = await _seed(
        repo, _create(title="100% pure"), _create(title="100 percent")
    )
    rows, total = await repo.find(PhotoFilter(search="100%"), 1, 10)
    assert total == 1
    assert rows[0].id == literal
    _, total = await repo.find(PhotoFilter(search="_"), 1, 10)
    assert total == 0


async def test_tag_filter_is_exact_and_combines_with_search(db_session) -> None:
    repo = PhotoRepository(db_session)
    match, _, _ = await _seed(
        repo,
        _create(title="Sea at dusk", tags=frozenset({"sea"})),
        _create(title="Sea at noon", tags=frozenset({"seaside"})),
        _create(title="Hills at dusk", tags=frozenset({"Sea"})),
    )
    rows, total = await repo.find(PhotoFilter(search="dusk", tag="sea"), 1, 10)
    assert total == 1
    assert rows[0].id == match


async def test_partial_update_and_tag_replacement(db_session) -> None:
    repo = PhotoRepository(db_session)
    (photo_id,) = await _seed(
        repo, _create(tags=frozenset({"a", "b"}), location="Oslo", camera="X100")
    )
    before = await repo.get_by_id(photo_id)

    updated = await repo.update_photo(
        photo_id, PhotoUpdate(title="New", tags=frozenset({"c"}), location=None)
    )
    await repo.commit()

    assert updated.title == "New"
    assert updated.description == "B"
    assert updated.tags == ["c"]
    assert updated.location is None
    assert updated.camera == "X100"
    assert updated.updated_at >= before.updated_at
    assert await repo.list_distinct_tags() == ["c"]


async def test_update_with_empty_tags_clears_them(db_session) -> None:
    repo = PhotoRepository(db_session)
    (photo_id,) = await _seed(repo, _create(tags=frozenset({"a"})))
    updated = await repo.update_photo(photo_id, PhotoUpdate(tags=frozenset()))
    await repo.commit()
    assert updated.tags == []


async def test_delete_removes_record_and_tags(db_session) -> None:
    repo = PhotoRepository(db_session)
    (photo_id,) = await _seed(repo, _create(tags=frozenset({"a"})))

    assert await repo.delete_photo(photo_id) is True
    await repo.commit()

    assert await repo.get_by_id(photo_id) is None
    remaining = await db_session.execute(select(PhotoTag).where(PhotoTag.photo_id == photo_id))
    assert remaining.scalars().all() == []


async def test_increment_likes(db_session) -> None:
    repo = PhotoRepository(db_session)
    (photo_id,) = await _seed(repo, _create())
    for _ in range(3):
        liked = await repo.increment_likes(photo_id)
        await repo.commit()
    assert liked.likes == 3
    assert (await repo.get_by_id(photo_id)).likes == 3


async def test_uncommitted_work_is_rolled_back(db_session) -> None:
    repo = PhotoRepository(db_session)
    created = await repo.create_photo(_create())
    await repo.rollback()
    assert await repo.get_by_id(created.id) is None


async def test_list_distinct_tags_sorted(db_session) -> None:
    repo = PhotoRepository(db_session)
    await _seed(
        repo,
        _create(tags=frozenset({"sea", "Blue"})),
        _create(tags=frozenset({"sea", "alpha"})),
    )
    assert await repo.list_distinct_tags() == ["Blue", "alpha", "sea"]


async def test_iter_object_keys_batches(db_session) -> None:
    repo = PhotoRepository(db_session)
    await _seed(repo, *(_create() for _ in range(5)))

    batches = [batch async for batch in repo.iter_object_keys(batch_size=2)]

    assert [len(b) for b in batches] == [2, 2, 1]
    ids = [photo_id for batch in batches for photo_id, _ in batch]
    assert ids == sorted(ids)


@pytest.mark.requires_db
async def test_postgres_search_and_likes(pg_session) -> None:
    """Same repository against PostgreSQL (ILIKE, atomic UPDATE)."""
    repo = PhotoRepository(pg_session)
    created = await repo.create_photo(_create(title="Postgres SUNSET", tags=frozenset({"pg"})))
    await repo.increment_likes(created.id)

    rows, total = await repo.find(PhotoFilter(search="sunset", tag="pg"), 1, 10)
    assert total >= 1
    found = next(r for r in rows if r.id == created.id)
    assert found.likes == 1
