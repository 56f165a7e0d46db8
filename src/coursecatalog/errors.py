"""Error taxonomy shared by services, stores, and the HTTP layer.

Learn: Services raise these instead of HTTPException so they stay usable
outside a request (seeding, the CLI, tests). The API layer registers one
exception handler for CatalogError and turns status_code + body() into
a JSON response.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for every error the API knows how to render."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def body(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(CatalogError):
    """One or more field rules failed. All messages are reported together."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or self.message)

    def body(self) -> dict[str, Any]:
        return {"errors": self.errors}


class AuthenticationError(CatalogError):
    """Credentials missing or rejected. The reason is never part of the body."""

    status_code = 401
    message = "Access Denied"


class AuthorizationError(CatalogError):
    status_code = 403
    message = "Only the owner of a course can change it"


class NotFoundError(CatalogError):
    status_code = 404
    message = "Not Found"


class ConflictError(CatalogError):
    """A unique field is already taken.

    Rendered as 400 with an ``errors`` list so clients handle it the same
    way as any other rejected payload.
    """

    status_code = 400

    def body(self) -> dict[str, Any]:
        return {"errors": [self.message]}


class DuplicateEmailError(ConflictError):
    def __init__(self, email_address: str):
        self.email_address = email_address
        super().__init__(f'The email address "{email_address}" is already in use')
