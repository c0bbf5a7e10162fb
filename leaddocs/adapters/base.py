from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from ..domain.types import DocumentHandle, FileHandle, FolderHandle, LeadRecord, LeadStatus


@dataclass(frozen=True)
class FetchedFile:
    content: bytes
    filename: str
    mime_type: str | None = None


class DocumentService(Protocol):
    async def copy_template(self, template_id: str, name: str, parent_id: str) -> DocumentHandle:
        ...

    async def batch_replace_text(self, document_id: str, replacements: Mapping[str, str]) -> None:
        ...


class DriveService(Protocol):
    async def create_folder(self, name: str, parent_id: str | None = None) -> FolderHandle:
        ...

    async def find_folder(self, name: str, parent_id: str) -> FolderHandle | None:
        ...

    async def move_folder(self, folder_id: str, new_parent_id: str) -> dict[str, Any]:
        ...

    async def get_parents(self, item_id: str) -> list[str]:
        ...

    async def list_files(self, parent_id: str) -> list[FileHandle]:
        ...

    async def move_file(self, file_id: str, new_parent_id: str) -> dict[str, Any]:
        ...

    async def upload_file(self, parent_id: str, name: str, content: bytes, mime_type: str | None) -> FileHandle:
        ...


class RowStore(Protocol):
    async def read_rows(self, store_id: str, range_spec: str) -> list[list[str]]:
        ...

    async def append_row(self, store_id: str, range_spec: str, row: list[str]) -> None:
        ...

    async def update_row(self, store_id: str, range_spec: str, row: list[str]) -> None:
        ...


class FileFetcher(Protocol):
    async def fetch(self, url: str) -> FetchedFile:
        ...


class LeadStore(Protocol):
    async def create_lead(
        self, *, business_legal_name: str, phase1_folder_id: str, phase1_data: dict[str, Any]
    ) -> str:
        ...

    async def get_lead_by_id(self, lead_id: str) -> LeadRecord | None:
        ...

    async def find_lead_by_folder(self, phase1_folder_id: str) -> LeadRecord | None:
        ...

    async def get_leads_by_status(self, status: LeadStatus) -> list[LeadRecord]:
        ...

    async def update_lead_status(
        self,
        lead_id: str,
        status: LeadStatus,
        updates: dict[str, Any] | None = None,
        *,
        expected_version: int | None = None,
    ) -> LeadRecord:
        ...

    async def record_error(self, lead_id: str, message: str) -> None:
        ...
