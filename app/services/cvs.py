"""CV persistence service.

Reads and writes the ``cvs`` table and the avatar storage bucket.  The
applicant form arrives as free text (``"5 years"``, ``"python, sql"``) and
is normalized here before it reaches the database.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from app.core.errors import NotFoundError
from app.db.supabase import get_avatar_bucket, get_supabase
from app.models.cv import CV, CVForm, CVReviewUpdate
from app.models.enums import CVStatus

logger = logging.getLogger(__name__)

_YEARS_RE = re.compile(r"(\d+)\s*years?", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Form parsing
# ---------------------------------------------------------------------------

def parse_years_experience(text: str | None) -> int:
    """Extract the first "<n> year(s)" figure from free text, 0 if none."""
    if not text:
        return 0
    match = _YEARS_RE.search(text)
    return int(match.group(1)) if match else 0


def split_list_field(text: str | None) -> list[str]:
    """Split a comma-separated form field into trimmed, non-empty items."""
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def _form_to_row(form: CVForm, user_id: UUID) -> dict[str, Any]:
    """Map the applicant form onto ``cvs`` column names."""
    return {
        "applicant_name": form.full_name.strip(),
        "email": form.email,
        "phone": form.phone,
        "address": form.address,
        "linkedin_profile": form.linkedin_profile,
        "github_profile": form.github_profile,
        "portfolio_link": form.portfolio_link,
        "current_job_title": form.current_job_title,
        "years_experience": parse_years_experience(form.experience),
        "education": form.education,
        "certifications": form.certifications,
        "references": form.references,
        "skills": split_list_field(form.skills),
        "languages_known": split_list_field(form.languages_known),
        "desired_salary": form.desired_salary,
        "willingness_to_relocate": form.willingness_to_relocate,
        "availability_for_remote_work": form.availability_for_remote_work,
        "industry_experience": form.industry_experience,
        "career_goals": form.career_goals,
        "user_id": str(user_id),
    }


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_cvs(
    order_by: str = "requirements_match",
    ascending: bool = False,
) -> list[CV]:
    """Return every CV, ordered server-side by *order_by*."""
    client = get_supabase()
    result = (
        client.table("cvs")
        .select("*")
        .order(order_by, desc=not ascending)
        .execute()
    )
    return [CV(**row) for row in result.data or []]


def get_cv(cv_id: UUID | str) -> CV:
    """Return a single CV or raise ``NotFoundError``."""
    client = get_supabase()
    result = (
        client.table("cvs")
        .select("*")
        .eq("id", str(cv_id))
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"CV not found: {cv_id}")
    return CV(**result.data[0])


def get_cv_for_user(user_id: UUID | str) -> CV | None:
    """Return the CV owned by *user_id*, or None when they have not submitted one."""
    client = get_supabase()
    result = (
        client.table("cvs")
        .select("*")
        .eq("user_id", str(user_id))
        .limit(1)
        .execute()
    )
    if not result.data:
        return None
    return CV(**result.data[0])


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def submit_cv(user_id: UUID, form: CVForm) -> CV:
    """Create the user's CV, or update it when one already exists.

    New CVs start as ``pending``; updates leave status, job and review
    fields untouched.
    """
    client = get_supabase()
    row = _form_to_row(form, user_id)
    existing = get_cv_for_user(user_id)

    if existing is None:
        row["status"] = CVStatus.pending.value
        row["application_date"] = datetime.now(timezone.utc).isoformat()
        result = client.table("cvs").insert(row).execute()
        event = "cv_submitted"
    else:
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = client.table("cvs").update(row).eq("id", str(existing.id)).execute()
        event = "cv_updated"

    if not result.data:
        raise RuntimeError("CV write returned no row")

    cv = CV(**result.data[0])
    logger.info(
        event,
        extra={
            "cv_id": str(cv.id),
            "user_id": str(user_id),
            "skills_count": len(cv.skills),
        },
    )
    return cv


def _update_cv(cv_id: UUID | str, update_data: dict[str, Any]) -> CV:
    client = get_supabase()
    update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
    result = client.table("cvs").update(update_data).eq("id", str(cv_id)).execute()
    if not result.data:
        raise NotFoundError(f"CV not found: {cv_id}")
    return CV(**result.data[0])


def update_cv_status(cv_id: UUID | str, status: CVStatus) -> CV:
    """Set the admin decision on a CV.

    Any status may replace any other; the one-way pending -> decided flow
    is a UI convention only.
    """
    cv = _update_cv(cv_id, {"status": status.value})
    logger.info(
        "cv_status_updated",
        extra={"cv_id": str(cv_id), "status": status.value},
    )
    return cv


def update_cv_review(cv_id: UUID | str, review: CVReviewUpdate) -> CV:
    """Apply the admin review fields that were provided."""
    update_data = review.model_dump(exclude_none=True)
    if not update_data:
        return get_cv(cv_id)
    return _update_cv(cv_id, update_data)


def upload_avatar(
    cv_id: UUID | str,
    filename: str,
    content: bytes,
    content_type: str | None = None,
) -> str:
    """Store an avatar image and point ``cvs.avatar_url`` at its public URL.

    Objects are keyed ``<uuid4>.<ext>`` so re-uploads never overwrite.
    """
    get_cv(cv_id)

    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    object_path = f"{uuid4()}.{ext}"

    bucket = get_avatar_bucket()
    file_options = {"content-type": content_type} if content_type else None
    bucket.upload(object_path, content, file_options)
    public_url: str = bucket.get_public_url(object_path)

    _update_cv(cv_id, {"avatar_url": public_url})

    logger.info(
        "avatar_uploaded",
        extra={"cv_id": str(cv_id), "object_path": object_path},
    )
    return public_url
