"""Applicant self-service endpoints.

Everything under ``/api/v1/me`` acts on the CV owned by the signed-in
user: submitting and editing it, the profile photo, the job application,
interviews and recruiter messages.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.core.auth import get_current_user
from app.core.errors import ConaError, NotFoundError, ValidationError
from app.models.auth import AuthUser
from app.models.cv import CV, AvatarUploadResponse, CVForm
from app.models.interview import Interview
from app.models.job import ApplicationResponse
from app.models.message import Message, UnreadCount
from app.services.cvs import get_cv_for_user, submit_cv, upload_avatar
from app.services.interviews import list_interviews_for_cv
from app.services.jobs import withdraw_application
from app.services.messages import list_messages, mark_read, unread_count

logger = logging.getLogger(__name__)

router = APIRouter()


def _own_cv(user: AuthUser) -> CV:
    cv = get_cv_for_user(user.id)
    if cv is None:
        raise NotFoundError("You have not submitted a CV yet")
    return cv


# ---------------------------------------------------------------------------
# CV
# ---------------------------------------------------------------------------

@router.get("/cv", response_model=CV)
async def get_my_cv(user: AuthUser = Depends(get_current_user)) -> CV:
    return _own_cv(user)


@router.put("/cv", response_model=CV)
async def put_my_cv(
    form: CVForm,
    user: AuthUser = Depends(get_current_user),
) -> CV:
    """Submit the CV form, creating the CV on first save."""
    try:
        return submit_cv(user.id, form)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "submit_cv_failed",
            extra={"user_id": str(user.id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to save CV: {exc}",
        ) from exc


@router.post("/cv/avatar", response_model=AvatarUploadResponse)
async def post_my_avatar(
    file: UploadFile = File(...),
    user: AuthUser = Depends(get_current_user),
) -> AvatarUploadResponse:
    """Upload a profile photo to the avatar bucket."""
    cv = _own_cv(user)
    content = await file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")

    try:
        url = upload_avatar(cv.id, file.filename or "", content, file.content_type)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "avatar_upload_failed",
            extra={"cv_id": str(cv.id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to upload avatar: {exc}",
        ) from exc

    return AvatarUploadResponse(cv_id=cv.id, avatar_url=url)


# ---------------------------------------------------------------------------
# Job application
# ---------------------------------------------------------------------------

@router.delete("/application", response_model=ApplicationResponse)
async def delete_my_application(
    user: AuthUser = Depends(get_current_user),
) -> ApplicationResponse:
    """Withdraw the CV from the job it was submitted to."""
    try:
        return withdraw_application(user.id)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "withdraw_failed",
            extra={"user_id": str(user.id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to withdraw application: {exc}",
        ) from exc


# ---------------------------------------------------------------------------
# Interviews and messages
# ---------------------------------------------------------------------------

@router.get("/interviews", response_model=list[Interview])
async def get_my_interviews(user: AuthUser = Depends(get_current_user)) -> list[Interview]:
    return list_interviews_for_cv(_own_cv(user).id)


@router.get("/messages", response_model=list[Message])
async def get_my_messages(user: AuthUser = Depends(get_current_user)) -> list[Message]:
    return list_messages(_own_cv(user).id)


@router.get("/messages/unread", response_model=UnreadCount)
async def get_my_unread_count(user: AuthUser = Depends(get_current_user)) -> UnreadCount:
    cv = _own_cv(user)
    return UnreadCount(cv_id=cv.id, unread=unread_count(cv.id))


@router.patch("/messages/{message_id}/read", response_model=Message)
async def read_my_message(
    message_id: UUID,
    user: AuthUser = Depends(get_current_user),
) -> Message:
    """Mark one of the user's own messages as read."""
    cv = _own_cv(user)
    try:
        return mark_read(message_id, cv_id=cv.id)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "mark_read_failed",
            extra={"message_id": str(message_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to mark message as read: {exc}",
        ) from exc
