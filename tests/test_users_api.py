"""User API tests — signup, duplicate prevention, and basic-auth identity.

Learn: Tests cover:
1. Signup + password hashing (the digest, never the plaintext, is stored)
2. Duplicate email → 400, first account untouched
3. Field validation with every violated rule reported
4. GET /users returns only the caller, never the digest
5. Every kind of auth failure looks the same from outside
"""

import base64

import pytest
from structlog.testing import capture_logs

from conftest import JOE, SALLY, auth_for
from coursecatalog.auth.password import verify_password


# ═══════════════════════════════════════════════════════════
# Signup
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_returns_201_with_location(client):
    r = await client.post("/api/users", json=JOE)
    assert r.status_code == 201
    assert r.headers["Location"] == "/"
    assert r.content == b""


@pytest.mark.asyncio
async def test_signup_stores_digest_not_plaintext(client, store):
    await client.post("/api/users", json=JOE)

    user = await store.get_user_by_email(JOE["emailAddress"])
    assert user is not None
    assert user.password_hash != JOE["password"]
    assert user.password_hash.startswith("$2")
    assert verify_password(JOE["password"], user.password_hash)


@pytest.mark.asyncio
async def test_signup_duplicate_email(client, store):
    """Same email twice → 400 duplicate error, first record unaffected."""
    r1 = await client.post("/api/users", json=JOE)
    assert r1.status_code == 201

    r2 = await client.post(
        "/api/users",
        json={**JOE, "firstName": "Imposter", "password": "other-password"},
    )
    assert r2.status_code == 400
    assert r2.json() == {
        "errors": ['The email address "joe@smith.com" is already in use']
    }

    user = await store.get_user_by_email(JOE["emailAddress"])
    assert user.first_name == "Joe"
    r = await client.get("/api/users", auth=auth_for(JOE))
    assert r.status_code == 200
    r = await client.get("/api/users", auth=(JOE["emailAddress"], "other-password"))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_signup_email_is_case_sensitive(client):
    await client.post("/api/users", json=JOE)
    r = await client.post("/api/users", json={**JOE, "emailAddress": "Joe@smith.com"})
    assert r.status_code == 201


# ═══════════════════════════════════════════════════════════
# Signup validation
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_empty_body_reports_every_field(client):
    r = await client.post("/api/users", json={})
    assert r.status_code == 400
    assert r.json() == {
        "errors": [
            'Please provide a value for "first name"',
            'Please provide a value for "last name"',
            'Please provide a value for "email"',
            'Please provide a value for "password"',
        ]
    }


@pytest.mark.asyncio
async def test_signup_invalid_email(client):
    r = await client.post("/api/users", json={**JOE, "emailAddress": "not-an-email"})
    assert r.status_code == 400
    assert r.json() == {
        "errors": ['Please provide a valid email address for "email"']
    }


@pytest.mark.asyncio
async def test_signup_blank_email_reports_one_message(client):
    """A blank email is missing, not malformed — one rule per field."""
    r = await client.post("/api/users", json={**JOE, "emailAddress": "   "})
    assert r.status_code == 400
    assert r.json() == {"errors": ['Please provide a value for "email"']}


@pytest.mark.asyncio
async def test_signup_blank_names_and_bad_email_together(client):
    r = await client.post(
        "/api/users",
        json={**JOE, "firstName": "", "lastName": None, "emailAddress": "joe@"},
    )
    assert r.status_code == 400
    assert r.json()["errors"] == [
        'Please provide a value for "first name"',
        'Please provide a value for "last name"',
        'Please provide a valid email address for "email"',
    ]


@pytest.mark.asyncio
async def test_signup_non_object_body(client):
    r = await client.post("/api/users", json=["not", "an", "object"])
    assert r.status_code == 400
    assert r.json() == {"errors": ["Request body must be a JSON object"]}


@pytest.mark.asyncio
async def test_signup_malformed_json(client):
    r = await client.post(
        "/api/users",
        content=b'{"firstName": ',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"errors": ["Request body must be valid JSON"]}


# ═══════════════════════════════════════════════════════════
# GET /users
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_get_users_returns_only_caller(client, joe, sally):
    r = await client.get("/api/users", auth=sally)
    assert r.status_code == 200
    body = r.json()
    assert body["firstName"] == SALLY["firstName"]
    assert body["lastName"] == SALLY["lastName"]
    assert body["emailAddress"] == SALLY["emailAddress"]
    assert isinstance(body["id"], int)
    assert set(body) == {"id", "firstName", "lastName", "emailAddress"}


@pytest.mark.asyncio
async def test_get_users_sets_no_store(client, joe):
    r = await client.get("/api/users", auth=joe)
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_password_with_colon(client):
    user = {**JOE, "password": "pa:ss:word"}
    await client.post("/api/users", json=user)
    r = await client.get("/api/users", auth=auth_for(user))
    assert r.status_code == 200


# ═══════════════════════════════════════════════════════════
# Authentication failures
# ═══════════════════════════════════════════════════════════


def _basic(raw: bytes) -> dict:
    return {"Authorization": "Basic " + base64.b64encode(raw).decode()}


@pytest.mark.asyncio
async def test_auth_failures_are_indistinguishable(client, joe):
    """Missing, malformed, unknown user and wrong password all look alike."""
    attempts = [
        {},
        {"Authorization": "Basic"},
        {"Authorization": "Basic %%%not-base64%%%"},
        {"Authorization": "Bearer some-token"},
        _basic(b"no-colon-here"),
        _basic(b"\xff\xfe:\xff"),
        _basic(b"nobody@example.com:joepw"),
        _basic(b"joe@smith.com:wrong"),
        _basic(b"JOE@SMITH.COM:joepw"),
    ]

    responses = [await client.get("/api/users", headers=h) for h in attempts]

    for r in responses:
        assert r.status_code == 401
        assert r.json() == {"message": "Access Denied"}
        assert r.headers["WWW-Authenticate"].startswith("Basic")


@pytest.mark.asyncio
async def test_auth_denial_reason_is_logged_not_returned(client, joe):
    with capture_logs() as logs:
        r = await client.get("/api/users", auth=("joe@smith.com", "wrong"))

    assert r.status_code == 401
    assert "bad_password" not in r.text

    denied = [e for e in logs if e["event"] == "auth.denied"]
    assert len(denied) == 1
    assert denied[0]["reason"] == "bad_password"
    assert denied[0]["identifier"] == "joe@smith.com"
    assert denied[0]["log_level"] == "warning"
