# leaddocs/service_layer/use_cases/phase_two.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from ...config import settings
from ...domain.enrichment import enrich, merge_phase_data, restamp_phase_two, snapshot_fields
from ...domain.normalizer import normalize_fields
from ...domain.policies import phase_two_gate
from ...domain.replacements import build_replacement_map
from ...domain.types import FileHandle, FolderHandle, FolderSet, LeadRecord, LeadStatus, MaterializationResult, Phase
from ...errors import InvalidTransitionError, LeadNotFoundError
from ..bootstrap import Workspace
from ..guard import call_external
from ..materialize import materialize_batch, phase_two_plan
from ..provisioning import move_case_folder, move_documents_to_data_room, provision_phase_two
from ..uploads import UploadReport, route_uploads
from .phase_one import identity_defaults_from_settings

log = logging.getLogger(__name__)


@dataclass
class PhaseTwoResult:
    lead: LeadRecord
    folders: FolderSet
    documents: MaterializationResult
    uploads: UploadReport
    moved_to_data_room: list[FileHandle]

    def to_dict(self) -> dict[str, Any]:
        return {
            "lead_id": self.lead.lead_id,
            "status": self.lead.status.value,
            "folder": self.folders.case.to_dict(),
            "documents": self.documents.to_list(),
            "partial": self.documents.partial,
            "uploads": self.uploads.to_dict(),
            "moved_to_data_room": [f.name for f in self.moved_to_data_room],
        }


async def _load_lead(ws: Workspace, lead_id: str) -> LeadRecord:
    lead = await call_external("leads.get_lead_by_id", ws.leads.get_lead_by_id(lead_id))
    if lead is None:
        raise LeadNotFoundError(lead_id)
    return lead


async def run_phase_two(
    ws: Workspace,
    lead_id: str,
    raw: Mapping[str, Any],
    *,
    now: datetime | None = None,
    templates: Mapping[str, str | None] | None = None,
) -> PhaseTwoResult:
    """
    Follow-up intake for a PHASE_1_COMPLETE lead.

    Order: gate, mark PHASE_2_IN_PROGRESS, move the case folder, build the phase-two
    folders, sweep phase-one documents into Data Room, route uploads, render the
    phase-two documents from the merged data, mark PHASE_2_COMPLETE. Anything that
    fails after the lead is marked in progress is recorded on the lead (ERROR) and re-raised.
    """
    lead = await _load_lead(ws, lead_id)
    blocked, reason = phase_two_gate(lead)
    if blocked:
        raise InvalidTransitionError(lead.status.value, LeadStatus.PHASE_2_IN_PROGRESS.value, reason)

    lead = await call_external(
        "leads.update_lead_status",
        ws.leads.update_lead_status(lead_id, LeadStatus.PHASE_2_IN_PROGRESS, expected_version=lead.row_version),
    )

    try:
        case = FolderHandle(id=lead.phase1_folder_id or "", name=lead.business_legal_name)
        await move_case_folder(ws.drive, case.id, ws.phase2_root_id)
        folders = await provision_phase_two(ws.drive, case)
        moved = await move_documents_to_data_room(ws.drive, folders)
        uploads = await route_uploads(ws.drive, ws.files, raw, folders, max_bytes=settings.FILE_UPLOAD_MAX_BYTES)

        phase_two = normalize_fields(raw)
        values = enrich(
            merge_phase_data(lead.phase1_submission_data, phase_two),
            raw,
            phase=Phase.two,
            now=now,
            identity_defaults=identity_defaults_from_settings(),
            strict_identity=settings.STRICT_IDENTITY,
            calendar_link=settings.CALENDAR_LINK,
        )
        business_name = values.get("business_legal_name") or lead.business_legal_name
        plan = phase_two_plan(business_name, templates)
        documents = await materialize_batch(ws.docs, ws.drive, plan, folders, build_replacement_map(values))

        lead = await call_external(
            "leads.update_lead_status",
            ws.leads.update_lead_status(
                lead_id,
                LeadStatus.PHASE_2_COMPLETE,
                {
                    "phase2_folder_id": case.id,
                    "phase2_submission_data_json": snapshot_fields(
                        {k: v for k, v in restamp_phase_two(phase_two).items() if v}
                    ),
                },
                expected_version=lead.row_version,
            ),
        )
    except Exception as e:
        await ws.leads.record_error(lead_id, f"{e.__class__.__name__}: {e}")
        raise

    log.info(
        "phase two done for lead %s: docs=%d/%d uploads=%d",
        lead_id,
        len(documents.succeeded),
        len(documents.entries),
        len(uploads.uploaded),
    )
    return PhaseTwoResult(
        lead=lead,
        folders=folders,
        documents=documents,
        uploads=uploads,
        moved_to_data_room=moved,
    )
