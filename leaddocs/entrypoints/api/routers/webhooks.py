# leaddocs/entrypoints/api/routers/webhooks.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from ..deps import require_api_key, workspace_dep
from ....adapters.ingestion.fillout import FilloutParser
from ....schemas import PhaseOneOut, PhaseTwoOut
from ....service_layer.bootstrap import Workspace
from ....service_layer.use_cases.phase_one import run_phase_one
from ....service_layer.use_cases.phase_two import run_phase_two

log = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

_parser = FilloutParser()


@router.post("/webhook/fillout", response_model=PhaseOneOut, dependencies=[Depends(require_api_key)])
async def phase_one_webhook(
    payload: Any = Body(...),
    ws: Workspace = Depends(workspace_dep),
) -> PhaseOneOut:
    submission = _parser.parse(payload)
    log.info("phase one submission (%s, form=%s)", submission.shape, submission.form_id)
    result = await run_phase_one(ws, submission.fields)
    return PhaseOneOut(**result.to_dict())


@router.post("/webhook/phase2", response_model=PhaseTwoOut, dependencies=[Depends(require_api_key)])
async def phase_two_webhook(
    payload: Any = Body(...),
    lead_id: str | None = Query(None, description="Falls back to lead_id in the payload"),
    ws: Workspace = Depends(workspace_dep),
) -> PhaseTwoOut:
    submission = _parser.parse(payload)
    target = (lead_id or submission.lead_id or "").strip()
    if not target:
        raise HTTPException(status_code=400, detail="lead_id is required (query string or payload)")
    log.info("phase two submission for lead %s (%s)", target, submission.shape)
    result = await run_phase_two(ws, target, submission.fields)
    return PhaseTwoOut(**result.to_dict())
