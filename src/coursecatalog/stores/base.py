"""Store interface — the single source of truth for users and courses.

Learn: Both backends (SQLAlchemy and the JSON flat file) implement
CatalogStore. The app builds one store at startup, keeps it on
app.state, and closes it at shutdown. Services only ever talk to this
interface, so they don't care which backend is behind it.

Records come back as ORM objects (SQL) or dataclasses (JSON); both
satisfy the UserRecord / CourseRecord protocols below, which is all the
services and the pydantic response schemas need.
"""

import abc
from typing import Any, Optional, Protocol


class UserRecord(Protocol):
    id: int
    first_name: str
    last_name: str
    email_address: str
    password_hash: str


class CourseRecord(Protocol):
    id: int
    user_id: int
    title: str
    description: str
    estimated_time: Optional[str]
    materials_needed: Optional[str]
    owner: UserRecord


# Columns a caller may set on a course. Ownership is not among them.
COURSE_FIELDS = ("title", "description", "estimated_time", "materials_needed")


class CatalogStore(abc.ABC):
    """Identity store + course store behind one lifecycle."""

    backend: str = "abstract"

    async def open(self) -> None:
        """Acquire resources. Called once from the app lifespan."""

    async def close(self) -> None:
        """Release resources. Called once at shutdown."""

    @abc.abstractmethod
    async def ping(self) -> None:
        """Raise if the backing storage is unreachable."""

    # ─── Users ──────────────────────────────────────────

    @abc.abstractmethod
    async def get_user(self, user_id: int) -> Optional[UserRecord]: ...

    @abc.abstractmethod
    async def get_user_by_email(self, email_address: str) -> Optional[UserRecord]:
        """Exact, case-sensitive lookup."""

    @abc.abstractmethod
    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email_address: str,
        password_hash: str,
    ) -> UserRecord:
        """Insert a user. Raises DuplicateEmailError if the email is taken.

        The uniqueness check and the insert must be atomic.
        """

    @abc.abstractmethod
    async def count_users(self) -> int: ...

    # ─── Courses ────────────────────────────────────────

    @abc.abstractmethod
    async def list_courses(self) -> list[CourseRecord]:
        """All courses ordered by id, each with its owner loaded."""

    @abc.abstractmethod
    async def get_course(self, course_id: int) -> Optional[CourseRecord]: ...

    @abc.abstractmethod
    async def create_course(
        self, user_id: int, values: dict[str, Any]
    ) -> CourseRecord: ...

    @abc.abstractmethod
    async def update_course(
        self, course_id: int, changes: dict[str, Any]
    ) -> Optional[CourseRecord]:
        """Apply only the keys present in changes. None if the course is gone."""

    @abc.abstractmethod
    async def delete_course(self, course_id: int) -> bool: ...


def course_values(values: dict[str, Any]) -> dict[str, Any]:
    """Drop anything that isn't a settable course column."""
    return {k: v for k, v in values.items() if k in COURSE_FIELDS}
