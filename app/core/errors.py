"""Domain exceptions raised by the service layer.

Services raise these without knowing about HTTP; ``cona_error_handler`` is
registered on the FastAPI app and turns them into JSON error responses
with the matching status code and a ``detail`` message.
"""

from __future__ import annotations

from fastapi import Request
from starlette.responses import JSONResponse


class ConaError(Exception):
    """Base class for all service-level errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ConaError):
    """A referenced row does not exist."""

    status_code = 404


class ConflictError(ConaError):
    """The request conflicts with the current state of a row."""

    status_code = 409


class ValidationError(ConaError):
    """Input passed schema validation but breaks a business rule."""

    status_code = 422


class AuthError(ConaError):
    """Missing or invalid credentials."""

    status_code = 401


class ForbiddenError(ConaError):
    """Authenticated, but not allowed to perform the action."""

    status_code = 403


async def cona_error_handler(request: Request, exc: ConaError) -> JSONResponse:
    """Render a ``ConaError`` as ``{"detail": message}``."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )
