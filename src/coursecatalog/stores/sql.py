"""Relational store — SQLAlchemy async ORM.

Learn: Every store method opens its own AsyncSession and commits before
returning, so one HTTP request == a handful of short transactions and no
session outlives the call. Courses are always loaded with selectinload
(owner) because the response schemas read course.owner after the session
is closed; lazy loading there would raise.
"""

from typing import Any, Optional

import structlog
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import selectinload

from coursecatalog.db.engine import build_engine, build_session_factory
from coursecatalog.db.models import Base, Course, User
from coursecatalog.errors import DuplicateEmailError
from coursecatalog.stores.base import CatalogStore, course_values

logger = structlog.get_logger()


class SqlCatalogStore(CatalogStore):
    """CatalogStore backed by a relational database."""

    backend = "sql"

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        create_schema: bool = False,
    ):
        self.database_url = database_url
        self.echo = echo
        self.create_schema = create_schema
        self._engine: Optional[AsyncEngine] = None
        self._sessions = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("SqlCatalogStore used before open()")
        return self._engine

    def session(self) -> AsyncSession:
        if self._sessions is None:
            raise RuntimeError("SqlCatalogStore used before open()")
        return self._sessions()

    async def open(self) -> None:
        self._engine = build_engine(self.database_url, echo=self.echo)
        self._sessions = build_session_factory(self._engine)
        if self.create_schema:
            await self.create_all()
        logger.info("store.opened", backend=self.backend)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("store.closed", backend=self.backend)

    async def create_all(self) -> None:
        """Create any missing tables. Alembic is the way for real schema changes."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    # ─── Users ──────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[User]:
        async with self.session() as session:
            return await session.get(User, user_id)

    async def get_user_by_email(self, email_address: str) -> Optional[User]:
        async with self.session() as session:
            result = await session.execute(
                select(User).where(User.email_address == email_address)
            )
            return result.scalars().first()

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email_address: str,
        password_hash: str,
    ) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email_address=email_address,
            password_hash=password_hash,
        )
        async with self.session() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                # The unique constraint is the source of truth, even under races
                await session.rollback()
                raise DuplicateEmailError(email_address) from None
        return user

    async def count_users(self) -> int:
        async with self.session() as session:
            result = await session.execute(select(func.count()).select_from(User))
            return result.scalar_one()

    # ─── Courses ────────────────────────────────────────

    async def list_courses(self) -> list[Course]:
        async with self.session() as session:
            result = await session.execute(
                select(Course)
                .options(selectinload(Course.owner))
                .order_by(Course.id)
            )
            return list(result.scalars().all())

    async def get_course(self, course_id: int) -> Optional[Course]:
        async with self.session() as session:
            return await self._load_course(session, course_id)

    async def create_course(self, user_id: int, values: dict[str, Any]) -> Course:
        async with self.session() as session:
            course = Course(user_id=user_id, **course_values(values))
            session.add(course)
            await session.commit()
            return await self._load_course(session, course.id)

    async def update_course(
        self, course_id: int, changes: dict[str, Any]
    ) -> Optional[Course]:
        async with self.session() as session:
            course = await self._load_course(session, course_id)
            if course is None:
                return None
            for field, value in course_values(changes).items():
                setattr(course, field, value)
            await session.commit()
            return course

    async def delete_course(self, course_id: int) -> bool:
        async with self.session() as session:
            course = await session.get(Course, course_id)
            if course is None:
                return False
            await session.delete(course)
            await session.commit()
            return True

    @staticmethod
    async def _load_course(session: AsyncSession, course_id: int) -> Optional[Course]:
        result = await session.execute(
            select(Course)
            .where(Course.id == course_id)
            .options(selectinload(Course.owner))
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()
