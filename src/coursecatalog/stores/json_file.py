"""Flat-file store — the whole catalog in one JSON document.

Learn: Handy for demos and for running without a database. The file is
re-read on every operation so edits made by hand show up immediately.
Writes go through an asyncio.Lock (read-check-write is atomic within the
process, which is what keeps emails unique) and land via a temp file +
os.replace so a crash never leaves half a document behind. File I/O runs
in a worker thread to keep the event loop free.

Document shape:
    {"users": [{"id", "firstName", "lastName", "emailAddress", "passwordHash"}],
     "courses": [{"id", "userId", "title", "description",
                  "estimatedTime", "materialsNeeded"}],
     "lastIds": {"users": n, "courses": n}}

lastIds only grows, so an id freed by a delete is never handed out again.
Documents written without it fall back to the highest id present.
"""

import asyncio
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import structlog

from coursecatalog.errors import DuplicateEmailError
from coursecatalog.stores.base import CatalogStore, course_values

logger = structlog.get_logger()


@dataclass
class StoredUser:
    id: int
    first_name: str
    last_name: str
    email_address: str
    password_hash: str

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> "StoredUser":
        return cls(
            id=doc["id"],
            first_name=doc["firstName"],
            last_name=doc["lastName"],
            email_address=doc["emailAddress"],
            password_hash=doc["passwordHash"],
        )


@dataclass
class StoredCourse:
    id: int
    user_id: int
    title: str
    description: str
    estimated_time: Optional[str]
    materials_needed: Optional[str]
    owner: Optional[StoredUser] = None

    @classmethod
    def from_doc(
        cls, doc: dict[str, Any], owner: Optional[StoredUser]
    ) -> "StoredCourse":
        return cls(
            id=doc["id"],
            user_id=doc["userId"],
            title=doc["title"],
            description=doc["description"],
            estimated_time=doc.get("estimatedTime"),
            materials_needed=doc.get("materialsNeeded"),
            owner=owner,
        )


# snake_case attribute -> camelCase document key
_COURSE_KEYS = {
    "title": "title",
    "description": "description",
    "estimated_time": "estimatedTime",
    "materials_needed": "materialsNeeded",
}


def _empty_document() -> dict[str, list]:
    return {"users": [], "courses": []}


def _next_id(doc: dict[str, Any], kind: str) -> int:
    last_ids = doc.setdefault("lastIds", {})
    highest = max((item["id"] for item in doc[kind]), default=0)
    next_id = max(last_ids.get(kind, 0), highest) + 1
    last_ids[kind] = next_id
    return next_id


class JsonFileCatalogStore(CatalogStore):
    """CatalogStore backed by a single JSON file."""

    backend = "json"

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        await asyncio.to_thread(self._ensure_file)
        logger.info("store.opened", backend=self.backend, path=str(self.path))

    async def close(self) -> None:
        logger.info("store.closed", backend=self.backend, path=str(self.path))

    async def ping(self) -> None:
        await self._read()

    # ─── File I/O ───────────────────────────────────────

    def _ensure_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write_sync(_empty_document())

    def _read_sync(self) -> dict[str, list]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                doc = json.load(fh)
        except FileNotFoundError:
            return _empty_document()
        doc.setdefault("users", [])
        doc.setdefault("courses", [])
        return doc

    def _write_sync(self, doc: dict[str, list]) -> None:
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(doc, fh, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    async def _read(self) -> dict[str, list]:
        return await asyncio.to_thread(self._read_sync)

    async def _write(self, doc: dict[str, list]) -> None:
        await asyncio.to_thread(self._write_sync, doc)

    @staticmethod
    def _users_by_id(doc: dict[str, list]) -> dict[int, StoredUser]:
        return {u["id"]: StoredUser.from_doc(u) for u in doc["users"]}

    @staticmethod
    def _find(items: list[dict[str, Any]], item_id: int) -> Optional[dict[str, Any]]:
        return next((item for item in items if item["id"] == item_id), None)

    # ─── Users ──────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[StoredUser]:
        doc = await self._read()
        found = self._find(doc["users"], user_id)
        return StoredUser.from_doc(found) if found else None

    async def get_user_by_email(self, email_address: str) -> Optional[StoredUser]:
        doc = await self._read()
        for user in doc["users"]:
            if user["emailAddress"] == email_address:
                return StoredUser.from_doc(user)
        return None

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email_address: str,
        password_hash: str,
    ) -> StoredUser:
        async with self._lock:
            doc = await self._read()
            if any(u["emailAddress"] == email_address for u in doc["users"]):
                raise DuplicateEmailError(email_address)
            entry = {
                "id": _next_id(doc, "users"),
                "firstName": first_name,
                "lastName": last_name,
                "emailAddress": email_address,
                "passwordHash": password_hash,
            }
            doc["users"].append(entry)
            await self._write(doc)
        return StoredUser.from_doc(entry)

    async def count_users(self) -> int:
        doc = await self._read()
        return len(doc["users"])

    # ─── Courses ────────────────────────────────────────

    async def list_courses(self) -> list[StoredCourse]:
        doc = await self._read()
        users = self._users_by_id(doc)
        return [
            StoredCourse.from_doc(c, users.get(c["userId"]))
            for c in sorted(doc["courses"], key=lambda c: c["id"])
        ]

    async def get_course(self, course_id: int) -> Optional[StoredCourse]:
        doc = await self._read()
        found = self._find(doc["courses"], course_id)
        if found is None:
            return None
        return StoredCourse.from_doc(found, self._users_by_id(doc).get(found["userId"]))

    async def create_course(self, user_id: int, values: dict[str, Any]) -> StoredCourse:
        async with self._lock:
            doc = await self._read()
            users = self._users_by_id(doc)
            if user_id not in users:
                raise ValueError(f"user {user_id} does not exist")
            entry = {"id": _next_id(doc, "courses"), "userId": user_id}
            for field in _COURSE_KEYS:
                entry[_COURSE_KEYS[field]] = values.get(field)
            doc["courses"].append(entry)
            await self._write(doc)
        return StoredCourse.from_doc(entry, users[user_id])

    async def update_course(
        self, course_id: int, changes: dict[str, Any]
    ) -> Optional[StoredCourse]:
        async with self._lock:
            doc = await self._read()
            found = self._find(doc["courses"], course_id)
            if found is None:
                return None
            for field, value in course_values(changes).items():
                found[_COURSE_KEYS[field]] = value
            await self._write(doc)
            owner = self._users_by_id(doc).get(found["userId"])
        return StoredCourse.from_doc(found, owner)

    async def delete_course(self, course_id: int) -> bool:
        async with self._lock:
            doc = await self._read()
            remaining = [c for c in doc["courses"] if c["id"] != course_id]
            if len(remaining) == len(doc["courses"]):
                return False
            doc["courses"] = remaining
            await self._write(doc)
        return True
