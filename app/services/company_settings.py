"""Company settings service for the single-row ``settings`` table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.db.supabase import get_supabase
from app.models.company_settings import CompanySettings, CompanySettingsUpdate

logger = logging.getLogger(__name__)


def get_company_settings() -> CompanySettings:
    """Return the settings row, or defaults when none has been saved yet."""
    client = get_supabase()
    result = client.table("settings").select("*").limit(1).execute()
    if not result.data:
        return CompanySettings()
    return CompanySettings(**result.data[0])


def update_company_settings(update: CompanySettingsUpdate) -> CompanySettings:
    """Save settings, creating the row on first save."""
    client = get_supabase()
    current = get_company_settings()
    payload = update.model_dump(mode="json")
    payload["updated_at"] = datetime.now(timezone.utc).isoformat()

    if current.id is None:
        result = client.table("settings").insert(payload).execute()
    else:
        result = (
            client.table("settings")
            .update(payload)
            .eq("id", str(current.id))
            .execute()
        )

    if not result.data:
        raise RuntimeError("Settings write returned no row")

    logger.info("company_settings_updated", extra={"company_name": update.company_name})
    return CompanySettings(**result.data[0])
