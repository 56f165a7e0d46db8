"""Persistence backends.

build_store() picks one from settings. The app calls it once in the
lifespan; tests construct stores directly.
"""

from starlette.requests import Request

from coursecatalog.config import Settings
from coursecatalog.stores.base import CatalogStore, CourseRecord, UserRecord
from coursecatalog.stores.json_file import JsonFileCatalogStore
from coursecatalog.stores.sql import SqlCatalogStore


def build_store(settings: Settings) -> CatalogStore:
    if settings.store_backend == "json":
        return JsonFileCatalogStore(settings.json_store_path)
    return SqlCatalogStore(
        settings.database_url,
        echo=settings.debug,
        create_schema=settings.auto_create_schema,
    )


def get_store(request: Request) -> CatalogStore:
    """FastAPI dependency — the store the app opened at startup."""
    return request.app.state.store


__all__ = [
    "CatalogStore",
    "CourseRecord",
    "JsonFileCatalogStore",
    "SqlCatalogStore",
    "UserRecord",
    "build_store",
    "get_store",
]
