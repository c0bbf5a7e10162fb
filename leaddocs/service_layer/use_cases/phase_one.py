# leaddocs/service_layer/use_cases/phase_one.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from ...config import settings
from ...domain.enrichment import enrich, intake_fields, overlay, snapshot_fields
from ...domain.field_map import label_key
from ...domain.identity import IdentityDefaults
from ...domain.normalizer import normalize_fields
from ...domain.policies import require_business_name
from ...domain.replacements import build_replacement_map
from ...domain.types import FolderSet, MaterializationResult, Phase
from ..bootstrap import Workspace
from ..guard import call_external
from ..materialize import materialize_batch, phase_one_plan
from ..provisioning import provision_phase_one
from ..returning import find_previous_submission

log = logging.getLogger(__name__)

# Provenance of the earlier submission; never carried into a new one.
NOT_CARRIED = frozenset({"submission_time", "submission_id", "submission_date", "form_id", "lead_id"})


@dataclass
class PhaseOneResult:
    lead_id: str
    business_legal_name: str
    folders: FolderSet
    documents: MaterializationResult
    existing_lead: bool = False
    returning_customer: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "lead_id": self.lead_id,
            "business_legal_name": self.business_legal_name,
            "folder": self.folders.case.to_dict(),
            "documents": self.documents.to_list(),
            "partial": self.documents.partial,
            "existing_lead": self.existing_lead,
            "returning_customer": self.returning_customer,
        }


def identity_defaults_from_settings() -> IdentityDefaults:
    return IdentityDefaults(
        first_name=settings.DEFAULT_CONTACT_FIRST_NAME,
        last_name=settings.DEFAULT_CONTACT_LAST_NAME,
        email=settings.DEFAULT_CONTACT_EMAIL,
    )


async def _previous_layer(ws: Workspace, canonical: Mapping[str, str]) -> dict[str, Any]:
    if not settings.PREVIOUS_PROJECTS_SHEET_ID:
        return {}
    email = canonical.get("email_sign") or canonical.get("email_poc") or canonical.get("contact_email")
    first = canonical.get("first_name_sign") or canonical.get("first_name_poc")
    previous = await find_previous_submission(
        ws.rows,
        settings.PREVIOUS_PROJECTS_SHEET_ID,
        settings.PREVIOUS_PROJECTS_SHEET_NAME,
        email=email,
        first_name=first,
    )
    return {k: v for k, v in (previous or {}).items() if label_key(k) not in NOT_CARRIED}


async def run_phase_one(
    ws: Workspace,
    raw: Mapping[str, Any],
    *,
    now: datetime | None = None,
    use_previous: bool = True,
) -> PhaseOneResult:
    """
    Initial intake: normalize, enrich, provision the case folder, materialize the
    phase-one documents and register the lead as PHASE_1_COMPLETE.

    Validation happens before any external call. A re-delivered submission for a
    business whose case folder already has a lead reuses that lead instead of
    creating a second one.
    """
    canonical = normalize_fields(raw)
    business_name = require_business_name(canonical)

    previous = await _previous_layer(ws, canonical) if use_previous else {}
    if previous:
        canonical = overlay(normalize_fields(previous), canonical)
        raw = {**previous, **raw}

    values = enrich(
        canonical,
        raw,
        phase=Phase.one,
        now=now,
        identity_defaults=identity_defaults_from_settings(),
        strict_identity=settings.STRICT_IDENTITY,
        calendar_link=settings.CALENDAR_LINK,
    )

    answers = intake_fields(canonical, raw)
    answers["phase_one_submission"] = values["phase_one_submission"]

    folders = await provision_phase_one(ws.drive, business_name, ws.phase1_root_id)
    plan = phase_one_plan(business_name, values.get("financing_option"))
    documents = await materialize_batch(ws.docs, ws.drive, plan, folders, build_replacement_map(values))

    existing = await call_external("leads.find_lead_by_folder", ws.leads.find_lead_by_folder(folders.case.id))
    if existing is not None:
        log.info("phase one re-run for %s; keeping lead %s", business_name, existing.lead_id)
        lead_id = existing.lead_id
    else:
        lead_id = await call_external(
            "leads.create_lead",
            ws.leads.create_lead(
                business_legal_name=business_name,
                phase1_folder_id=folders.case.id,
                phase1_data=snapshot_fields(answers),
            ),
        )

    log.info(
        "phase one done for %s: lead=%s docs=%d/%d",
        business_name,
        lead_id,
        len(documents.succeeded),
        len(documents.entries),
    )
    return PhaseOneResult(
        lead_id=lead_id,
        business_legal_name=business_name,
        folders=folders,
        documents=documents,
        existing_lead=existing is not None,
        returning_customer=bool(previous),
    )
