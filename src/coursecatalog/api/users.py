"""User API routes.

- GET  /users → the authenticated caller's own record
- POST /users → sign up (open), 201 with Location: /
"""

from fastapi import APIRouter, Depends, Response

from coursecatalog.auth.dependencies import get_current_user
from coursecatalog.schemas.user import UserCreate, UserRead
from coursecatalog.services.user_service import UserService
from coursecatalog.stores import get_store
from coursecatalog.stores.base import CatalogStore, UserRecord

router = APIRouter(prefix="/users")


def _svc(store: CatalogStore = Depends(get_store)) -> UserService:
    return UserService(store)


@router.get("", response_model=UserRead)
async def get_current_user_record(
    identity: UserRecord = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    return await svc.get_by_id(identity.id)


@router.post("", status_code=201, response_class=Response)
async def create_user(body: UserCreate, svc: UserService = Depends(_svc)):
    await svc.create(body)
    return Response(status_code=201, headers={"Location": "/"})
