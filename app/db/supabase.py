"""Supabase access helpers.

``get_supabase()`` returns a lazily-initialized, process-wide client built
from ``settings``.  ``get_avatar_bucket()`` and ``call_rpc()`` wrap the two
non-table surfaces the API touches: the avatar storage bucket and the
counter / admin-check remote procedures.
"""

from __future__ import annotations

from typing import Any

from supabase import Client, create_client

from app.core.config import settings

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def get_avatar_bucket() -> Any:
    """Return the storage bucket proxy used for applicant avatars."""
    return get_supabase().storage.from_(settings.AVATAR_BUCKET)


def call_rpc(name: str, params: dict[str, Any] | None = None) -> Any:
    """Execute a Postgres function and return its ``data`` payload."""
    result = get_supabase().rpc(name, params or {}).execute()
    return result.data
