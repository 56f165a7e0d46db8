"""User service — signup and lookup.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the store. Passwords are hashed
here, before anything reaches the store; the store never sees plaintext.
"""

import asyncio

import structlog

from coursecatalog.auth.password import hash_password
from coursecatalog.errors import NotFoundError
from coursecatalog.schemas.user import UserCreate
from coursecatalog.stores.base import CatalogStore, UserRecord

logger = structlog.get_logger()


class UserService:
    """Business logic for users."""

    def __init__(self, store: CatalogStore):
        self.store = store

    async def get_by_id(self, user_id: int) -> UserRecord:
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User Not Found")
        return user

    async def create(self, data: UserCreate) -> UserRecord:
        """Register a user. DuplicateEmailError propagates from the store."""
        password_hash = await asyncio.to_thread(hash_password, data.password)
        user = await self.store.create_user(
            first_name=data.first_name,
            last_name=data.last_name,
            email_address=data.email_address,
            password_hash=password_hash,
        )
        logger.info("user.created", user_id=user.id)
        return user
