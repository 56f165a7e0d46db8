"""Load users and courses from a JSON seed document.

Seed format:
    {
      "users": [{"firstName", "lastName", "emailAddress", "password"}],
      "courses": [{"userId" | "ownerEmail", "title", "description",
                   "estimatedTime", "materialsNeeded"}]
    }

Seed passwords are plaintext and go through the same UserCreate
validation and hashing as a signup. Courses name their owner either by
ownerEmail or by userId, where userId is the 1-based position of the
user in the seed file's users list (ids in the store may differ).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from coursecatalog.errors import DuplicateEmailError, ValidationError
from coursecatalog.schemas.course import CourseCreate
from coursecatalog.schemas.user import UserCreate
from coursecatalog.schemas.validation import error_messages
from coursecatalog.services.course_service import CourseService
from coursecatalog.services.user_service import UserService
from coursecatalog.stores.base import CatalogStore

logger = structlog.get_logger()


@dataclass
class SeedResult:
    users: int = 0
    courses: int = 0
    skipped: bool = False


def load_seed_document(path: str | Path) -> dict[str, list[dict[str, Any]]]:
    with Path(path).open("r", encoding="utf-8") as fh:
        doc = json.load(fh)
    if not isinstance(doc, dict):
        raise ValueError(f"{path}: seed document must be a JSON object")
    return {"users": doc.get("users", []), "courses": doc.get("courses", [])}


def _parse(model, payload: dict[str, Any], what: str):
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        messages = [f"{what}: {m}" for m in error_messages(e.errors())]
        raise ValidationError(messages) from None


async def seed_store(
    store: CatalogStore,
    document: dict[str, list[dict[str, Any]]],
    force: bool = False,
) -> SeedResult:
    """Insert the document's users and courses.

    Does nothing when the store already has users, unless force=True.
    The whole document is validated and every owner resolved before the
    first write, so a rejected document leaves the store untouched.
    """
    if not force and await store.count_users() > 0:
        logger.info("seed.skipped", reason="store not empty")
        return SeedResult(skipped=True)

    user_rows, course_rows = await _plan(store, document)

    users = UserService(store)
    courses = CourseService(store)
    result = SeedResult()

    created = []
    for data in user_rows:
        created.append(await users.create(data))
        result.users += 1

    for position, data in course_rows:
        await courses.create(created[position], data)
        result.courses += 1

    logger.info("seed.loaded", users=result.users, courses=result.courses)
    return result


async def _plan(store: CatalogStore, document):
    """Validate every row and resolve every owner without touching the store.

    Returns the parsed users and (owner position, parsed course) pairs.
    """
    user_rows = []
    positions: dict[str, int] = {}
    for index, payload in enumerate(document.get("users", []), start=1):
        data = _parse(UserCreate, payload, f"users[{index}]")
        if data.email_address in positions:
            raise ValidationError(
                [f"users[{index}]: duplicate email address {data.email_address!r}"]
            )
        positions[data.email_address] = len(user_rows)
        user_rows.append(data)

    for data in user_rows:
        if await store.get_user_by_email(data.email_address) is not None:
            raise DuplicateEmailError(data.email_address)

    course_rows = []
    for index, payload in enumerate(document.get("courses", []), start=1):
        position = _resolve_owner(payload, len(user_rows), positions)
        if position is None:
            raise ValidationError([f"courses[{index}]: owner not found in seed users"])
        course_rows.append((position, _parse(CourseCreate, payload, f"courses[{index}]")))
    return user_rows, course_rows


def _resolve_owner(payload, user_count: int, positions: dict[str, int]):
    """Index into the seed's users list, or None when the owner is unknown."""
    if "ownerEmail" in payload:
        return positions.get(payload["ownerEmail"])
    position = payload.get("userId")
    if isinstance(position, int) and not isinstance(position, bool):
        if 1 <= position <= user_count:
            return position - 1
    return None


async def seed_from_file(
    store: CatalogStore, path: str | Path, force: bool = False
) -> SeedResult:
    return await seed_store(store, load_seed_document(path), force=force)
