# leaddocs/entrypoints/api/routers/leads.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import require_api_key, workspace_dep
from ....domain.types import LeadStatus
from ....errors import LeadNotFoundError
from ....schemas import LeadOut
from ....service_layer.bootstrap import Workspace
from ....service_layer.guard import call_external

router = APIRouter(tags=["leads"])


@router.get("/leads/{lead_id}", response_model=LeadOut, dependencies=[Depends(require_api_key)])
async def get_lead(lead_id: str, ws: Workspace = Depends(workspace_dep)) -> LeadOut:
    lead = await call_external("leads.get_lead_by_id", ws.leads.get_lead_by_id(lead_id))
    if lead is None:
        raise LeadNotFoundError(lead_id)
    return LeadOut(**lead.to_dict())


@router.get("/leads", response_model=list[LeadOut], dependencies=[Depends(require_api_key)])
async def leads_by_status(
    status: str = Query(..., description="PHASE_1_COMPLETE | PHASE_2_IN_PROGRESS | PHASE_2_COMPLETE | ERROR"),
    ws: Workspace = Depends(workspace_dep),
) -> list[LeadOut]:
    try:
        wanted = LeadStatus(status.strip().upper())
    except Exception:
        raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
    leads = await call_external("leads.get_leads_by_status", ws.leads.get_leads_by_status(wanted))
    return [LeadOut(**lead.to_dict()) for lead in leads]
