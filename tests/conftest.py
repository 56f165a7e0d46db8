"""Test fixtures — a fresh, isolated store per test, on both backends.

Learn: Testing pattern for the app:

1. The `store` fixture is parametrized over the two backends, so every
   test that uses it runs twice: in-memory SQLite (aiosqlite + StaticPool,
   tables created on open) and a JSON file under tmp_path.
2. The `client` fixture overrides get_store to hand that store to the
   app, then talks to it over httpx's ASGITransport — no server, no
   lifespan, no network.
3. Nothing survives a test: the in-memory DB dies with its engine and
   tmp_path is unique per test.

bcrypt's work factor is dropped to the minimum before anything imports
the settings singleton, otherwise each signup costs ~100ms.
"""

import os

os.environ.setdefault("COURSECATALOG_BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from coursecatalog.main import create_app  # noqa: E402
from coursecatalog.stores import (  # noqa: E402
    JsonFileCatalogStore,
    SqlCatalogStore,
    get_store,
)

MEMORY_DB_URL = "sqlite+aiosqlite:///:memory:"

JOE = {
    "firstName": "Joe",
    "lastName": "Smith",
    "emailAddress": "joe@smith.com",
    "password": "joepw",
}

SALLY = {
    "firstName": "Sally",
    "lastName": "Jones",
    "emailAddress": "sally@jones.com",
    "password": "sallypw",
}

COURSE = {
    "title": "Learn How to Program",
    "description": "In this course, you'll learn how to write code like a pro!",
    "estimatedTime": "6 hours",
    "materialsNeeded": "* Notebook computer running Mac OS X or Windows\n* Text editor",
}


def auth_for(user: dict) -> tuple[str, str]:
    return (user["emailAddress"], user["password"])


@pytest_asyncio.fixture(params=["sql", "json"])
async def store(request, tmp_path):
    """An opened, empty store. Runs each test once per backend."""
    if request.param == "sql":
        s = SqlCatalogStore(MEMORY_DB_URL, create_schema=True)
    else:
        s = JsonFileCatalogStore(tmp_path / "catalog.json")
    await s.open()
    try:
        yield s
    finally:
        await s.close()


@pytest_asyncio.fixture()
async def app(store):
    application = create_app()
    application.state.store = store
    application.dependency_overrides[get_store] = lambda: store
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client wired to the per-test store."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def joe(client):
    """Sign Joe up and return his basic-auth tuple."""
    r = await client.post("/api/users", json=JOE)
    assert r.status_code == 201
    return auth_for(JOE)


@pytest_asyncio.fixture()
async def sally(client):
    r = await client.post("/api/users", json=SALLY)
    assert r.status_code == 201
    return auth_for(SALLY)


@pytest_asyncio.fixture()
async def joes_course(client, joe):
    """A course owned by Joe. Returns its id."""
    r = await client.post("/api/courses", json=COURSE, auth=joe)
    assert r.status_code == 201
    return int(r.headers["Location"].rsplit("/", 1)[-1])
