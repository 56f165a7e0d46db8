"""Course ownership checks."""

from coursecatalog.errors import AuthorizationError
from coursecatalog.stores.base import CourseRecord, UserRecord


def is_owner(identity: UserRecord, course: CourseRecord) -> bool:
    return identity.id == course.user_id


def require_owner(identity: UserRecord, course: CourseRecord) -> None:
    """Raise AuthorizationError unless identity owns the (existing) course."""
    if not is_owner(identity, course):
        raise AuthorizationError()
