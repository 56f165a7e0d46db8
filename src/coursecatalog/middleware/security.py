"""Security headers middleware.

Learn: A JSON-only API can lock responses down harder than a site that
serves HTML:
- X-Content-Type-Options: prevents MIME-type sniffing
- X-Frame-Options: never render in a frame
- Referrer-Policy: limits referrer info leakage
- Cache-Control: no-store on anything sent with credentials
- Strict-Transport-Security: forces HTTPS (only on HTTPS connections)
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)

        # Responses to authenticated calls may contain the caller's own record
        if "authorization" in request.headers:
            response.headers["Cache-Control"] = "no-store"

        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response
