"""Store contract tests — run against both backends via the `store` fixture.

Learn: The services only rely on CatalogStore, so one suite pins the
contract for every backend: uniqueness is enforced by the store itself,
partial updates touch only the given keys, and courses always come back
with their owner loaded.
"""

import asyncio
import json

import pytest

from coursecatalog.errors import DuplicateEmailError
from coursecatalog.stores import (
    JsonFileCatalogStore,
    SqlCatalogStore,
    build_store,
)
from coursecatalog.config import Settings


async def _user(store, email="joe@smith.com"):
    return await store.create_user("Joe", "Smith", email, "$2b$04$digest")


# ═══════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_and_get_user(store):
    user = await _user(store)
    assert isinstance(user.id, int)

    assert (await store.get_user(user.id)).email_address == "joe@smith.com"
    assert (await store.get_user_by_email("joe@smith.com")).id == user.id
    assert await store.get_user(user.id + 100) is None
    assert await store.get_user_by_email("JOE@SMITH.COM") is None
    assert await store.count_users() == 1


@pytest.mark.asyncio
async def test_duplicate_email_rejected_by_store(store):
    await _user(store)
    with pytest.raises(DuplicateEmailError) as exc:
        await _user(store)
    assert exc.value.email_address == "joe@smith.com"
    assert await store.count_users() == 1


@pytest.mark.asyncio
async def test_user_ids_are_unique(store):
    a = await _user(store, "a@example.com")
    b = await _user(store, "b@example.com")
    assert a.id != b.id


# ═══════════════════════════════════════════════════════════
# Courses
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_course_lifecycle(store):
    owner = await _user(store)
    course = await store.create_course(
        owner.id,
        {"title": "T", "description": "D", "estimated_time": "1h", "materials_needed": None},
    )
    assert course.user_id == owner.id
    assert course.owner.email_address == "joe@smith.com"

    fetched = await store.get_course(course.id)
    assert fetched.title == "T"
    assert fetched.owner.id == owner.id

    updated = await store.update_course(course.id, {"description": "D2"})
    assert updated.description == "D2"
    assert updated.title == "T"
    assert updated.estimated_time == "1h"

    assert await store.delete_course(course.id) is True
    assert await store.get_course(course.id) is None
    assert await store.delete_course(course.id) is False


@pytest.mark.asyncio
async def test_update_ignores_non_course_fields(store):
    owner = await _user(store)
    other = await _user(store, "other@example.com")
    course = await store.create_course(owner.id, {"title": "T", "description": "D"})

    updated = await store.update_course(
        course.id, {"user_id": other.id, "id": 999, "title": "T2"}
    )
    assert updated.user_id == owner.id
    assert updated.id == course.id
    assert updated.title == "T2"


@pytest.mark.asyncio
async def test_update_missing_course(store):
    assert await store.update_course(404, {"title": "x"}) is None


@pytest.mark.asyncio
async def test_list_courses_ordered_with_owner(store):
    owner = await _user(store)
    for title in ("a", "b", "c"):
        await store.create_course(owner.id, {"title": title, "description": "d"})

    courses = await store.list_courses()
    assert [c.title for c in courses] == ["a", "b", "c"]
    assert all(c.owner.id == owner.id for c in courses)


@pytest.mark.asyncio
async def test_deleted_course_id_is_not_reused(store):
    owner = await _user(store)
    first = await store.create_course(owner.id, {"title": "A", "description": "D"})
    second = await store.create_course(owner.id, {"title": "B", "description": "D"})
    assert await store.delete_course(second.id) is True

    third = await store.create_course(owner.id, {"title": "C", "description": "D"})
    assert third.id not in (first.id, second.id)
    assert await store.get_course(second.id) is None


# ═══════════════════════════════════════════════════════════
# Concurrent signups
# ═══════════════════════════════════════════════════════════


@pytest.fixture(params=["sql", "json"])
def file_backed_store(request, tmp_path):
    """Stores that use real files, so concurrent writers really race."""
    if request.param == "sql":
        return SqlCatalogStore(
            f"sqlite+aiosqlite:///{tmp_path / 'race.db'}", create_schema=True
        )
    return JsonFileCatalogStore(tmp_path / "race.json")


@pytest.mark.asyncio
async def test_concurrent_signups_same_email(file_backed_store):
    store = file_backed_store
    await store.open()
    try:
        results = await asyncio.gather(
            *(_user(store) for _ in range(5)), return_exceptions=True
        )
        successes = [r for r in results if not isinstance(r, BaseException)]
        failures = [r for r in results if isinstance(r, BaseException)]

        assert len(successes) == 1
        assert all(isinstance(f, DuplicateEmailError) for f in failures)
        assert await store.count_users() == 1
    finally:
        await store.close()


# ═══════════════════════════════════════════════════════════
# JSON file specifics
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_json_store_creates_file_and_persists(tmp_path):
    path = tmp_path / "nested" / "catalog.json"
    store = JsonFileCatalogStore(path)
    await store.open()
    assert json.loads(path.read_text()) == {"users": [], "courses": []}

    owner = await _user(store)
    await store.create_course(owner.id, {"title": "T", "description": "D"})
    await store.close()

    doc = json.loads(path.read_text())
    assert doc["users"][0]["emailAddress"] == "joe@smith.com"
    assert doc["users"][0]["passwordHash"] == "$2b$04$digest"
    assert doc["courses"][0] == {
        "id": 1,
        "userId": owner.id,
        "title": "T",
        "description": "D",
        "estimatedTime": None,
        "materialsNeeded": None,
    }

    reopened = JsonFileCatalogStore(path)
    await reopened.open()
    assert (await reopened.get_course(1)).owner.first_name == "Joe"


@pytest.mark.asyncio
async def test_json_store_counts_ids_from_documents_without_counters(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "users": [{"id": 7, "firstName": "Joe", "lastName": "Smith",
                   "emailAddress": "joe@smith.com", "passwordHash": "x"}],
        "courses": [],
    }))
    store = JsonFileCatalogStore(path)
    await store.open()

    sally = await store.create_user("Sally", "Jones", "sally@jones.com", "y")
    assert sally.id == 8
    assert json.loads(path.read_text())["lastIds"] == {"users": 8}


@pytest.mark.asyncio
async def test_json_store_rejects_unknown_owner(tmp_path):
    store = JsonFileCatalogStore(tmp_path / "catalog.json")
    await store.open()
    with pytest.raises(ValueError):
        await store.create_course(42, {"title": "T", "description": "D"})


# ═══════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════


def test_build_store_picks_backend(tmp_path):
    json_store = build_store(
        Settings(store_backend="json", json_store_path=str(tmp_path / "c.json"))
    )
    assert isinstance(json_store, JsonFileCatalogStore)

    sql_store = build_store(Settings(database_url="sqlite+aiosqlite:///:memory:"))
    assert isinstance(sql_store, SqlCatalogStore)
    assert sql_store.create_schema is True
