"""Course API routes.

Learn: Reads are open; writes take the authenticated user from
get_current_user and pass it to the service, which does the 404 → 403
ordering. Routes only deal with HTTP: status codes, Location headers,
empty 204 bodies.
"""

from fastapi import APIRouter, Depends, Response

from coursecatalog.auth.dependencies import get_current_user
from coursecatalog.schemas.course import CourseCreate, CourseRead, CourseUpdate
from coursecatalog.services.course_service import CourseService
from coursecatalog.stores import get_store
from coursecatalog.stores.base import CatalogStore, UserRecord

router = APIRouter(prefix="/courses")


def _svc(store: CatalogStore = Depends(get_store)) -> CourseService:
    return CourseService(store)


@router.get("", response_model=list[CourseRead])
async def list_courses(svc: CourseService = Depends(_svc)):
    return await svc.list_courses()


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(course_id: int, svc: CourseService = Depends(_svc)):
    return await svc.get(course_id)


@router.post("", status_code=201, response_class=Response)
async def create_course(
    body: CourseCreate,
    identity: UserRecord = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.create(identity, body)
    return Response(
        status_code=201,
        headers={"Location": f"/api/courses/{course.id}"},
    )


@router.put("/{course_id}", status_code=204, response_class=Response)
async def update_course(
    course_id: int,
    body: CourseUpdate,
    identity: UserRecord = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    await svc.update(identity, course_id, body)
    return Response(status_code=204)


@router.delete("/{course_id}", status_code=204, response_class=Response)
async def delete_course(
    course_id: int,
    identity: UserRecord = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    await svc.delete(identity, course_id)
    return Response(status_code=204)
