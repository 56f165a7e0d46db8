"""Exception handlers — the one place errors become HTTP responses.

Learn: Services raise CatalogError subclasses, FastAPI raises
RequestValidationError for bad input, Starlette raises HTTPException
for unmatched routes, and anything else is a bug. Each family gets
one handler here; register_exception_handlers() wires them into the
app. Internal details never reach the client.

FastAPI parses a JSON body before it resolves dependencies, so a
malformed body on a route that needs a user would otherwise answer 400
to a caller with no credentials. The validation handler runs the auth
check first for those routes.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coursecatalog.auth.dependencies import get_current_user
from coursecatalog.errors import AuthenticationError, CatalogError
from coursecatalog.schemas.validation import error_messages
from coursecatalog.stores import get_store

logger = structlog.get_logger()

BASIC_CHALLENGE = 'Basic realm="coursecatalog", charset="UTF-8"'


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": BASIC_CHALLENGE}
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)


def _depends_on(dependant, call) -> bool:
    return any(d.call is call or _depends_on(d, call) for d in dependant.dependencies)


def _requires_user(request: Request) -> bool:
    dependant = getattr(request.scope.get("route"), "dependant", None)
    return dependant is not None and _depends_on(dependant, get_current_user)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    # A path parameter that isn't an id can't name an existing resource
    if any(err.get("loc") and err["loc"][0] == "path" for err in errors):
        return JSONResponse(status_code=404, content={"message": "Route Not Found"})

    body_unreadable = any(err.get("type") == "json_invalid" for err in errors)
    if body_unreadable and _requires_user(request):
        try:
            await get_current_user(request.headers.get("authorization"), get_store(request))
        except AuthenticationError as auth_exc:
            return await catalog_error_handler(request, auth_exc)

    messages = error_messages(errors)
    logger.info("request.invalid", path=request.url.path, errors=messages)
    return JSONResponse(status_code=400, content={"errors": messages})


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        content = {"message": "Route Not Found"}
    else:
        content = {"message": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if request.app.state.settings.enable_error_logging:
        logger.error(
            "request.failed",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
    else:
        logger.error(
            "request.failed",
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
        )
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
