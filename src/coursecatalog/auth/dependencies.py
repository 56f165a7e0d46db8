"""FastAPI auth dependencies.

Learn: Used as Depends() in route handlers. get_current_user runs the
authenticator and hands the authenticated user straight to the handler
as an argument — nothing is stashed on the request object. Every
request re-authenticates; there are no sessions or tokens.

All denials look identical to the client (401, "Access Denied"). Which
check failed is only written to the server log, so the API can't be
used to probe which emails have accounts.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header

from coursecatalog.auth.authenticator import Authenticated, authenticate
from coursecatalog.errors import AuthenticationError
from coursecatalog.stores import get_store
from coursecatalog.stores.base import CatalogStore, UserRecord

logger = structlog.get_logger()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    store: CatalogStore = Depends(get_store),
) -> UserRecord:
    """Resolve the authenticated user (required — 401 otherwise)."""
    result = await authenticate(authorization, store)
    if isinstance(result, Authenticated):
        logger.debug("auth.succeeded", user_id=result.identity.id)
        return result.identity

    logger.warning(
        "auth.denied",
        reason=result.reason.value,
        identifier=result.identifier,
    )
    raise AuthenticationError()
