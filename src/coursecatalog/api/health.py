"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running
and the store behind it answers.
"""

from fastapi import APIRouter, Depends

from coursecatalog import __version__
from coursecatalog.stores import get_store
from coursecatalog.stores.base import CatalogStore

router = APIRouter()


@router.get("/health")
async def health_check(store: CatalogStore = Depends(get_store)):
    """Check server health and store connectivity."""
    checks = {"server": "ok", "version": __version__, "backend": store.backend}

    try:
        await store.ping()
        checks["store"] = "ok"
    except Exception as e:
        checks["store"] = f"error: {e}"

    status = "healthy" if checks["store"] == "ok" else "degraded"
    return {"status": status, **checks}
