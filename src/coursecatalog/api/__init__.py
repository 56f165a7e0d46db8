"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Unlike a router-wide dependencies=[...] guard, auth here is per
route: GET /courses is open while POST /courses is not, so handlers
that need an identity ask for it with Depends(get_current_user).
"""

from fastapi import APIRouter

from coursecatalog.api.courses import router as courses_router
from coursecatalog.api.health import router as health_router
from coursecatalog.api.users import router as users_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(courses_router, tags=["courses"])
