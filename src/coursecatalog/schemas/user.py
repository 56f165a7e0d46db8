"""Pydantic schemas for users.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
UserRead has no password field at all, so there is no way for a digest
to end up in a response by accident.
"""

from typing import Annotated

from pydantic import StringConstraints

from coursecatalog.schemas.base import CamelModel, EmailAddress, NonBlankStr


class UserCreate(CamelModel):
    first_name: NonBlankStr
    last_name: NonBlankStr
    email_address: EmailAddress
    password: Annotated[str, StringConstraints(min_length=1)]


class UserRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    email_address: str
