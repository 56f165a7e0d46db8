"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan owns the store: built (or injected) and opened at
startup, kept on app.state.store for the get_store dependency, closed at
shutdown. Nothing about persistence lives in module globals.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursecatalog import __version__
from coursecatalog.api import api_router
from coursecatalog.api.errors import register_exception_handlers
from coursecatalog.config import Settings, settings as default_settings
from coursecatalog.logging_config import configure_logging
from coursecatalog.middleware.access_log import AccessLogMiddleware
from coursecatalog.middleware.errors import UnhandledErrorMiddleware
from coursecatalog.middleware.request_id import RequestIdMiddleware
from coursecatalog.middleware.security import SecurityHeadersMiddleware
from coursecatalog.seed import seed_from_file
from coursecatalog.stores import CatalogStore, build_store

logger = structlog.get_logger()


def _lifespan(settings: Settings, store: Optional[CatalogStore]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle.

        Anything before `yield` runs at startup, after `yield` runs at shutdown.
        """
        catalog = store or build_store(settings)
        await catalog.open()
        app.state.store = catalog
        logger.info(
            "coursecatalog.starting",
            version=__version__,
            environment=settings.environment,
            backend=catalog.backend,
        )

        if settings.seed_path:
            await seed_from_file(catalog, settings.seed_path)

        try:
            yield
        finally:
            logger.info("coursecatalog.shutdown")
            await catalog.close()

    return lifespan


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CatalogStore] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Pass a store to use it instead of the one settings describe; the app
    still opens and closes it.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Course Catalog API",
        description="Courses and the users who own them",
        version=__version__,
        lifespan=_lifespan(settings, store),
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → AccessLog → Security → CORS → UnhandledError → handler
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.state.settings = settings
    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": "Welcome to the Course Catalog API!"}

    app.include_router(api_router)

    return app


def run() -> FastAPI:
    """uvicorn factory entry point: configures logging, then builds the app."""
    configure_logging(default_settings.log_level, default_settings.log_json)
    return create_app()
