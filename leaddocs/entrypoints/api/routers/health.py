# leaddocs/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..deps import require_api_key
from ....config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config", dependencies=[Depends(require_api_key)])
def debug_config() -> dict[str, Any]:
    def _redact(v: str | None) -> str | None:
        if not v:
            return v
        if len(v) <= 8:
            return "***"
        return v[:4] + "***" + v[-4:]

    return {
        "ENV": settings.ENV,
        "WORKSPACE_BACKEND": settings.WORKSPACE_BACKEND,
        "LEAD_STORE_BACKEND": settings.LEAD_STORE_BACKEND,
        "LEADDOCS_DB_URL": settings.LEADDOCS_DB_URL,
        "LEADS_PHASE1_FOLDER_ID": settings.LEADS_PHASE1_FOLDER_ID,
        "LEADS_PHASE2_FOLDER_ID": settings.LEADS_PHASE2_FOLDER_ID,
        "LEAD_TRACKING_SHEET_ID": settings.LEAD_TRACKING_SHEET_ID,
        "GOOGLE_ACCESS_TOKEN": _redact(settings.GOOGLE_ACCESS_TOKEN),
        "STRICT_IDENTITY": settings.STRICT_IDENTITY,
    }
