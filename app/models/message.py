"""Pydantic models for the ``messages`` table (append-only notification log)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Payload for sending a message to an applicant."""
    message: str = Field(min_length=1)


class Message(BaseModel):
    """Full message record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cv_id: UUID | None = None
    message: str
    read: bool | None = False
    created_at: datetime | None = None


class UnreadCount(BaseModel):
    cv_id: UUID
    unread: int = 0
