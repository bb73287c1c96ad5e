"""Company settings endpoints (admin only)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import require_admin
from app.core.errors import ConaError
from app.models.company_settings import CompanySettings, CompanySettingsUpdate
from app.services.company_settings import get_company_settings, update_company_settings

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=CompanySettings)
async def get_settings() -> CompanySettings:
    return get_company_settings()


@router.put("", response_model=CompanySettings)
async def put_settings(body: CompanySettingsUpdate) -> CompanySettings:
    try:
        return update_company_settings(body)
    except ConaError:
        raise
    except Exception as exc:
        logger.error("update_settings_failed", extra={"error_message": str(exc)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to save settings: {exc}",
        ) from exc
