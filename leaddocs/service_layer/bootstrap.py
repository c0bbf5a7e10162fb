from __future__ import annotations

import logging
from dataclasses import dataclass

from ..adapters.base import DocumentService, DriveService, FileFetcher, LeadStore, RowStore
from ..adapters.clients.file_fetch import HttpFileFetcher
from ..adapters.clients.google_docs import GoogleDocsClient
from ..adapters.clients.google_drive import GoogleDriveClient
from ..adapters.clients.google_sheets import GoogleSheetsClient
from ..adapters.memory import InMemoryDocs, InMemoryDrive, InMemoryFiles, InMemorySheets
from ..adapters.repos.leads import SheetLeadStore
from ..adapters.repos.sql_leads import SqlLeadStore
from ..config import settings

log = logging.getLogger(__name__)

DEV_ENVS = {"dev", "local", "test"}

MEMORY_PHASE1_ROOT = "phase1-root"
MEMORY_PHASE2_ROOT = "phase2-root"
MEMORY_TRACKING_SHEET = "lead-tracking"


@dataclass
class Workspace:
    docs: DocumentService
    drive: DriveService
    rows: RowStore
    files: FileFetcher
    leads: LeadStore
    phase1_root_id: str
    phase2_root_id: str


def _build_lead_store(rows: RowStore, sheet_id: str | None) -> LeadStore:
    backend = (settings.LEAD_STORE_BACKEND or "").strip().lower()
    if backend == "sql":
        from ..db import AsyncSessionLocal

        return SqlLeadStore(AsyncSessionLocal)
    return SheetLeadStore(rows, sheet_id or "", settings.LEAD_TRACKING_SHEET_NAME)


def memory_workspace() -> Workspace:
    drive = InMemoryDrive()
    drive.add_root(MEMORY_PHASE1_ROOT, "Leads - Phase 1")
    drive.add_root(MEMORY_PHASE2_ROOT, "Leads - Phase 2")
    rows = InMemorySheets()
    return Workspace(
        docs=InMemoryDocs(drive),
        drive=drive,
        rows=rows,
        files=InMemoryFiles(),
        leads=_build_lead_store(rows, MEMORY_TRACKING_SHEET),
        phase1_root_id=MEMORY_PHASE1_ROOT,
        phase2_root_id=MEMORY_PHASE2_ROOT,
    )


def google_workspace() -> Workspace:
    if not (settings.LEADS_PHASE1_FOLDER_ID and settings.LEADS_PHASE2_FOLDER_ID):
        raise RuntimeError("LEADS_PHASE1_FOLDER_ID and LEADS_PHASE2_FOLDER_ID must be set")
    rows = GoogleSheetsClient.from_settings()
    return Workspace(
        docs=GoogleDocsClient.from_settings(),
        drive=GoogleDriveClient.from_settings(),
        rows=rows,
        files=HttpFileFetcher(),
        leads=_build_lead_store(rows, settings.LEAD_TRACKING_SHEET_ID),
        phase1_root_id=settings.LEADS_PHASE1_FOLDER_ID,
        phase2_root_id=settings.LEADS_PHASE2_FOLDER_ID,
    )


def build_workspace() -> Workspace:
    """
    Workspace builder that will NOT brick local dev.

    - google with credentials -> Google Drive/Docs/Sheets
    - memory, or google without a token in dev/local/test -> in-memory workspace
    - anything else in prod-like envs -> error
    """
    backend = (settings.WORKSPACE_BACKEND or "").strip().lower()
    env = (settings.ENV or "").strip().lower()

    if backend == "google" and settings.GOOGLE_ACCESS_TOKEN:
        return google_workspace()
    if backend == "memory" or env in DEV_ENVS:
        log.warning("using in-memory workspace (WORKSPACE_BACKEND=%r, ENV=%r)", backend, env)
        return memory_workspace()
    raise RuntimeError(f"workspace backend {backend!r} is not usable in ENV={env!r}")


_WORKSPACE: Workspace | None = None


def get_workspace() -> Workspace:
    global _WORKSPACE
    if _WORKSPACE is None:
        _WORKSPACE = build_workspace()
    return _WORKSPACE
