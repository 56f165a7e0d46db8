"""Catch-all for unexpected exceptions.

Learn: Starlette sends an app-wide Exception handler through
ServerErrorMiddleware, which wraps every user middleware. A 500 rendered
there never passes back through RequestIdMiddleware or
SecurityHeadersMiddleware. Registered innermost, this middleware turns
the exception into a response early enough for them to decorate it.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from coursecatalog.api.errors import unhandled_exception_handler


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Render anything the exception handlers didn't claim as a generic 500."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_exception_handler(request, exc)
