from __future__ import annotations

from typing import Mapping

from ..errors import IntakeValidationError, InvalidTransitionError
from .types import LeadRecord, LeadStatus

ALLOWED_TRANSITIONS: dict[LeadStatus, frozenset[LeadStatus]] = {
    LeadStatus.PHASE_1_COMPLETE: frozenset({LeadStatus.PHASE_2_IN_PROGRESS, LeadStatus.ERROR}),
    LeadStatus.PHASE_2_IN_PROGRESS: frozenset({LeadStatus.PHASE_2_COMPLETE, LeadStatus.ERROR}),
    LeadStatus.PHASE_2_COMPLETE: frozenset(),
    LeadStatus.ERROR: frozenset(),
}


def can_transition(current: LeadStatus, target: LeadStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: LeadStatus, target: LeadStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)


def phase_two_gate(lead: LeadRecord) -> tuple[bool, str | None]:
    """
    Returns (blocked, reason)
    """
    if lead.status != LeadStatus.PHASE_1_COMPLETE:
        return True, f"lead {lead.lead_id} is {lead.status.value}, expected {LeadStatus.PHASE_1_COMPLETE.value}"
    if not lead.phase1_folder_id:
        return True, f"lead {lead.lead_id} has no phase one folder"
    return False, None


def require_business_name(values: Mapping[str, str]) -> str:
    name = (values.get("business_legal_name") or "").strip()
    if not name:
        raise IntakeValidationError("business legal name is required", field="business_legal_name")
    return name
