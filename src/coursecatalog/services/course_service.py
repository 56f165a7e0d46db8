"""Course service — CRUD with ownership rules.

Learn: The order of checks in update/delete matters. Load the course
first (404 if missing), then check ownership (403), and only then
write. Asking "does this user own course 42?" when there is no course
42 has no sensible answer.
"""

import structlog

from coursecatalog.auth.guard import require_owner
from coursecatalog.errors import NotFoundError
from coursecatalog.schemas.course import CourseCreate, CourseUpdate
from coursecatalog.stores.base import CatalogStore, CourseRecord, UserRecord

logger = structlog.get_logger()

COURSE_NOT_FOUND = "Course Not Found"


class CourseService:
    """Business logic for courses."""

    def __init__(self, store: CatalogStore):
        self.store = store

    async def list_courses(self) -> list[CourseRecord]:
        return await self.store.list_courses()

    async def get(self, course_id: int) -> CourseRecord:
        course = await self.store.get_course(course_id)
        if course is None:
            raise NotFoundError(COURSE_NOT_FOUND)
        return course

    async def create(self, owner: UserRecord, data: CourseCreate) -> CourseRecord:
        course = await self.store.create_course(owner.id, data.model_dump())
        logger.info("course.created", course_id=course.id, user_id=owner.id)
        return course

    async def update(
        self, identity: UserRecord, course_id: int, data: CourseUpdate
    ) -> CourseRecord:
        course = await self.get(course_id)
        require_owner(identity, course)

        updated = await self.store.update_course(course_id, data.changes())
        if updated is None:
            # Deleted between the read and the write
            raise NotFoundError(COURSE_NOT_FOUND)
        logger.info(
            "course.updated",
            course_id=course_id,
            user_id=identity.id,
            fields=sorted(data.changes()),
        )
        return updated

    async def delete(self, identity: UserRecord, course_id: int) -> None:
        course = await self.get(course_id)
        require_owner(identity, course)

        if not await self.store.delete_course(course_id):
            raise NotFoundError(COURSE_NOT_FOUND)
        logger.info("course.deleted", course_id=course_id, user_id=identity.id)
