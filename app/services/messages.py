"""Applicant message service.

``messages`` is an append-only notification log from recruiters to
applicants; the only mutation after insert is flipping ``read``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from app.core.errors import NotFoundError, ValidationError
from app.db.supabase import get_supabase
from app.models.message import Message
from app.services.cvs import get_cv

logger = logging.getLogger(__name__)


def send_message(cv_id: UUID | str, text: str) -> Message:
    """Append a message for the applicant behind *cv_id*."""
    body = text.strip()
    if not body:
        raise ValidationError("Message must not be blank")

    get_cv(cv_id)

    client = get_supabase()
    result = (
        client.table("messages")
        .insert({"cv_id": str(cv_id), "message": body, "read": False})
        .execute()
    )
    if not result.data:
        raise RuntimeError("Message insert returned no row")

    message = Message(**result.data[0])
    logger.info(
        "message_sent",
        extra={"cv_id": str(cv_id), "message_id": str(message.id)},
    )
    return message


def list_messages(cv_id: UUID | str) -> list[Message]:
    """Messages for a CV, newest first."""
    client = get_supabase()
    result = (
        client.table("messages")
        .select("*")
        .eq("cv_id", str(cv_id))
        .order("created_at", desc=True)
        .execute()
    )
    return [Message(**row) for row in result.data or []]


def mark_read(message_id: UUID | str, cv_id: UUID | str | None = None) -> Message:
    """Flag a message as read.  When *cv_id* is given the message must belong to it."""
    client = get_supabase()
    query = client.table("messages").update({"read": True}).eq("id", str(message_id))
    if cv_id is not None:
        query = query.eq("cv_id", str(cv_id))
    result = query.execute()
    if not result.data:
        raise NotFoundError(f"Message not found: {message_id}")
    return Message(**result.data[0])


def unread_count(cv_id: UUID | str) -> int:
    client = get_supabase()
    result = (
        client.table("messages")
        .select("id", count="exact")
        .eq("cv_id", str(cv_id))
        .eq("read", False)
        .execute()
    )
    if result.count is not None:
        return result.count
    return len(result.data or [])
