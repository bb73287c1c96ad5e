"""Authenticated caller resolved from a Supabase access token."""

from uuid import UUID

from pydantic import BaseModel


class AuthUser(BaseModel):
    id: UUID
    email: str | None = None
    is_admin: bool = False
