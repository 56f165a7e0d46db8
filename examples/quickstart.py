#!/usr/bin/env python3
"""
Course Catalog Quickstart — the whole API in one script.

Signs up two users → creates a course as the first → updates it →
shows the second user being refused → deletes it.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: coursecatalog serve  (http://localhost:5000)
"""

import sys
import uuid

import httpx

BASE = "http://localhost:5000/api"


def signup(client: httpx.Client, first: str, email: str, password: str) -> None:
    resp = client.post("/users", json={
        "firstName": first,
        "lastName": "Demo",
        "emailAddress": email,
        "password": password,
    })
    assert resp.status_code == 201, f"Signup failed: {resp.status_code} {resp.text}"


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        sys.exit(1)
    health = resp.json()
    print(f"  Store ({health['backend']}): {'✓' if health['store'] == 'ok' else '✗'}")

    # ── Sign up ───────────────────────────────────────────────────
    owner_email = f"owner-{run_id}@example.com"
    other_email = f"other-{run_id}@example.com"
    print("\n1. Signing up two users...")
    signup(client, "Owner", owner_email, "owner-pw")
    signup(client, "Other", other_email, "other-pw")
    owner_auth = (owner_email, "owner-pw")
    other_auth = (other_email, "other-pw")

    resp = client.get("/users", auth=owner_auth)
    me = resp.json()
    print(f"   Authenticated as {me['firstName']} {me['lastName']} (id {me['id']})")

    # ── Validation ────────────────────────────────────────────────
    print("\n2. Posting an incomplete course...")
    resp = client.post("/courses", json={"title": ""}, auth=owner_auth)
    print(f"   {resp.status_code}: {resp.json()['errors']}")

    # ── Create ────────────────────────────────────────────────────
    print("\n3. Creating a course...")
    resp = client.post("/courses", auth=owner_auth, json={
        "title": "Learn How to Program",
        "description": "In this course, you'll learn how to write code like a pro!",
        "estimatedTime": "6 hours",
        "materialsNeeded": "* Notebook computer\n* Text editor",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    location = resp.headers["Location"]
    course_id = int(location.rsplit("/", 1)[-1])
    print(f"   Created at {location}")

    # ── Partial update ────────────────────────────────────────────
    print("\n4. Updating estimatedTime only...")
    resp = client.put(f"/courses/{course_id}", json={"estimatedTime": "8 hours"}, auth=owner_auth)
    assert resp.status_code == 204, f"Failed: {resp.text}"
    course = client.get(f"/courses/{course_id}").json()
    print(f"   {course['title']} — {course['estimatedTime']} (owner {course['owner']['emailAddress']})")

    # ── Ownership ─────────────────────────────────────────────────
    print("\n5. Another user tries to delete it...")
    resp = client.delete(f"/courses/{course_id}", auth=other_auth)
    print(f"   {resp.status_code}: {resp.json()['message']}")

    # ── Delete ────────────────────────────────────────────────────
    print("\n6. Owner deletes it...")
    resp = client.delete(f"/courses/{course_id}", auth=owner_auth)
    assert resp.status_code == 204, f"Failed: {resp.text}"
    print(f"   GET afterwards → {client.get(f'/courses/{course_id}').status_code}")

    print("\n✓ Done")


if __name__ == "__main__":
    main()
