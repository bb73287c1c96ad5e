"""Session gate for protected routes.

Callers send the Supabase access token they got at login as
``Authorization: Bearer <jwt>``.  ``get_current_user`` resolves it through
Supabase Auth; ``require_admin`` additionally checks the ``admin_users``
table through the ``check_is_admin`` RPC.  Sign-up, login and logout stay
with the Supabase client in the browser.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends, Header

from app.core.config import settings
from app.core.errors import AuthError, ForbiddenError
from app.db.supabase import call_rpc, get_supabase
from app.models.auth import AuthUser

logger = logging.getLogger(__name__)


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthError("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Authorization header must be 'Bearer <token>'")
    return token.strip()


def resolve_user(authorization: str | None) -> AuthUser:
    """Turn an Authorization header into an ``AuthUser`` or raise ``AuthError``."""
    token = _bearer_token(authorization)
    try:
        response = get_supabase().auth.get_user(token)
    except Exception as exc:
        logger.warning("auth_token_rejected", extra={"error_message": str(exc)})
        raise AuthError("Invalid or expired session") from exc

    user = getattr(response, "user", None)
    if user is None:
        raise AuthError("Invalid or expired session")
    return AuthUser(id=UUID(str(user.id)), email=getattr(user, "email", None))


def check_admin(user: AuthUser) -> AuthUser:
    """Return *user* flagged as admin, or raise ``ForbiddenError``."""
    try:
        is_admin = call_rpc(settings.ADMIN_CHECK_RPC, {"user_id": str(user.id)})
    except Exception as exc:
        logger.warning(
            "admin_check_failed",
            extra={"user_id": str(user.id), "error_message": str(exc)},
        )
        raise ForbiddenError("You don't have permission to access this page") from exc
    if not is_admin:
        logger.warning("admin_access_denied", extra={"user_id": str(user.id)})
        raise ForbiddenError("You don't have permission to access this page")
    return user.model_copy(update={"is_admin": True})


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_current_user(authorization: str | None = Header(default=None)) -> AuthUser:
    return resolve_user(authorization)


def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    return check_admin(user)
