"""Pydantic schemas for courses.

Learn: There is no userId on the input schemas. The owner always comes
from the authenticated identity; a userId sent by the client is ignored
along with any other unknown key.
"""

from typing import Optional

from pydantic import field_validator

from coursecatalog.schemas.base import CamelModel, NonBlankStr
from coursecatalog.schemas.user import UserRead
from coursecatalog.schemas.validation import blank_value_error


class CourseCreate(CamelModel):
    title: NonBlankStr
    description: NonBlankStr
    estimated_time: Optional[str] = None
    materials_needed: Optional[str] = None


class CourseUpdate(CamelModel):
    """Partial update: only the keys the client sent are applied.

    Required fields may be left out, but not sent as null or blank.
    """

    title: Optional[NonBlankStr] = None
    description: Optional[NonBlankStr] = None
    estimated_time: Optional[str] = None
    materials_needed: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise blank_value_error()
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CourseRead(CamelModel):
    id: int
    user_id: int
    title: str
    description: str
    estimated_time: Optional[str] = None
    materials_needed: Optional[str] = None
    owner: UserRead
