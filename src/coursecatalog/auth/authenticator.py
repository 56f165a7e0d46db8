"""Basic-auth authenticator.

Learn: authenticate() composes the three pieces — credential parsing,
the identity lookup in the store, and bcrypt verification — and returns
a typed result instead of raising. bcrypt runs in a worker thread so a
slow hash never stalls other requests on the event loop. The HTTP dependency decides what to
do with a Denied; the reason is for logs only.
"""

import asyncio
import enum
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from coursecatalog.auth.credentials import parse_basic_credentials
from coursecatalog.auth.password import hash_password, verify_password
from coursecatalog.stores.base import CatalogStore, UserRecord


class DenialReason(str, enum.Enum):
    NO_CREDENTIALS = "no_credentials"
    USER_NOT_FOUND = "user_not_found"
    BAD_PASSWORD = "bad_password"


@dataclass(frozen=True)
class Authenticated:
    identity: UserRecord


@dataclass(frozen=True)
class Denied:
    reason: DenialReason
    identifier: Optional[str] = None


AuthResult = Union[Authenticated, Denied]


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def _verify_dummy(secret: str) -> bool:
    return verify_password(secret, _dummy_hash())


async def authenticate(header: Optional[str], store: CatalogStore) -> AuthResult:
    """Authenticate one request from its raw Authorization header."""
    credentials = parse_basic_credentials(header)
    if credentials is None:
        return Denied(DenialReason.NO_CREDENTIALS)

    user = await store.get_user_by_email(credentials.identifier)
    if user is None:
        # Burn a bcrypt check anyway so unknown emails take as long as bad passwords
        await asyncio.to_thread(_verify_dummy, credentials.secret)
        return Denied(DenialReason.USER_NOT_FOUND, credentials.identifier)

    if not await asyncio.to_thread(
        verify_password, credentials.secret, user.password_hash
    ):
        return Denied(DenialReason.BAD_PASSWORD, credentials.identifier)

    return Authenticated(user)
