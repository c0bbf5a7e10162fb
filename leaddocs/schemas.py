from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Literal

LeadStatusName = Literal["PHASE_1_COMPLETE", "PHASE_2_IN_PROGRESS", "PHASE_2_COMPLETE", "ERROR"]


class LeadOut(BaseModel):
    lead_id: str
    status: LeadStatusName
    business_legal_name: str

    phase1_folder_id: str | None = None
    phase2_folder_id: str | None = None

    phase1_submission_data: dict[str, Any] = Field(default_factory=dict)
    phase2_submission_data: dict[str, Any] = Field(default_factory=dict)

    created_at: datetime | None = None
    last_updated: datetime | None = None

    error_details: str | None = None
    retry_count: int = Field(0, ge=0)
    row_version: int = Field(1, ge=1)


class DocumentOut(BaseModel):
    """Either {id, name, viewLink} or {error, name}."""

    name: str
    id: str | None = None
    viewLink: str | None = None
    error: str | None = None


class FolderOut(BaseModel):
    id: str
    name: str
    viewLink: str | None = None


class PhaseOneOut(BaseModel):
    success: bool = True
    lead_id: str
    business_legal_name: str
    folder: FolderOut
    documents: list[DocumentOut]
    partial: bool
    existing_lead: bool = False
    returning_customer: bool = False


class UploadsOut(BaseModel):
    uploaded: list[dict[str, str]]
    skipped: list[str]
    failed: list[dict[str, str]]


class PhaseTwoOut(BaseModel):
    success: bool = True
    lead_id: str
    status: LeadStatusName
    folder: FolderOut
    documents: list[DocumentOut]
    partial: bool
    uploads: UploadsOut
    moved_to_data_room: list[str]

