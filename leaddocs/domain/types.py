from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class LeadStatus(str, Enum):
    PHASE_1_COMPLETE = "PHASE_1_COMPLETE"
    PHASE_2_IN_PROGRESS = "PHASE_2_IN_PROGRESS"
    PHASE_2_COMPLETE = "PHASE_2_COMPLETE"
    ERROR = "ERROR"


class Phase(str, Enum):
    one = "phase_one"
    two = "phase_two"


@dataclass(frozen=True)
class DocumentSpec:
    """One entry of a phase's fixed document list."""

    key: str
    template_id: str | None
    name: str
    folder_key: str = "case"


@dataclass(frozen=True)
class DocumentHandle:
    id: str
    name: str
    view_link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "viewLink": self.view_link}


@dataclass(frozen=True)
class DocumentFailure:
    error: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "name": self.name}


@dataclass(frozen=True)
class FolderHandle:
    id: str
    name: str
    view_link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "viewLink": self.view_link}


@dataclass(frozen=True)
class FileHandle:
    id: str
    name: str
    mime_type: str | None = None
    view_link: str | None = None


@dataclass(frozen=True)
class FolderSet:
    case: FolderHandle
    subfolders: dict[str, FolderHandle] = field(default_factory=dict)

    def folder_id(self, key: str) -> str:
        if key == "case":
            return self.case.id
        return self.subfolders[key].id

    def to_dict(self) -> dict[str, Any]:
        return {
            "case": self.case.to_dict(),
            "subfolders": {k: v.to_dict() for k, v in self.subfolders.items()},
        }


@dataclass(frozen=True)
class LeadRecord:
    lead_id: str
    status: LeadStatus
    business_legal_name: str
    phase1_folder_id: str | None
    phase2_folder_id: str | None
    phase1_submission_data: dict[str, Any]
    phase2_submission_data: dict[str, Any]
    created_at: datetime | None
    last_updated: datetime | None
    error_details: str | None = None
    retry_count: int = 0
    row_version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "lead_id": self.lead_id,
            "status": self.status.value,
            "business_legal_name": self.business_legal_name,
            "phase1_folder_id": self.phase1_folder_id,
            "phase2_folder_id": self.phase2_folder_id,
            "phase1_submission_data": self.phase1_submission_data,
            "phase2_submission_data": self.phase2_submission_data,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "error_details": self.error_details,
            "retry_count": self.retry_count,
            "row_version": self.row_version,
        }


@dataclass(frozen=True)
class MaterializationResult:
    """Per-document outcome of one batch, in configured order."""

    entries: tuple[DocumentHandle | DocumentFailure, ...]

    @property
    def succeeded(self) -> list[DocumentHandle]:
        return [e for e in self.entries if isinstance(e, DocumentHandle)]

    @property
    def failed(self) -> list[DocumentFailure]:
        return [e for e in self.entries if isinstance(e, DocumentFailure)]

    @property
    def partial(self) -> bool:
        return bool(self.failed) and bool(self.succeeded)

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.entries]
