from __future__ import annotations

import logging

from ..adapters.base import DriveService
from ..adapters.clients.google_drive import FOLDER_MIME
from ..domain.types import FileHandle, FolderHandle, FolderSet
from ..errors import ExternalServiceError
from .guard import call_external

log = logging.getLogger(__name__)

PHASE_ONE_SUBFOLDERS: tuple[str, ...] = ("Internal", "External")
PHASE_TWO_SUBFOLDERS: tuple[str, ...] = ("Data Room", "Escrow Account", "Financial Statements", "Form C", "Content")


async def find_or_create_folder(drive: DriveService, name: str, parent_id: str) -> FolderHandle:
    """Search by name under parent first; a failed search counts as "not there yet"."""
    try:
        existing = await call_external("drive.find_folder", drive.find_folder(name, parent_id))
    except ExternalServiceError as e:
        log.warning("folder probe for %r under %s failed (%s); creating", name, parent_id, e)
        existing = None
    if existing is not None:
        log.info("reusing folder %r (%s)", name, existing.id)
        return existing
    folder = await call_external("drive.create_folder", drive.create_folder(name, parent_id))
    log.info("created folder %r (%s) under %s", name, folder.id, parent_id)
    return folder


async def provision_phase_one(drive: DriveService, business_name: str, root_id: str) -> FolderSet:
    case = await find_or_create_folder(drive, business_name, root_id)
    subfolders = {}
    for name in PHASE_ONE_SUBFOLDERS:
        subfolders[name] = await find_or_create_folder(drive, name, case.id)
    return FolderSet(case=case, subfolders=subfolders)


async def move_case_folder(drive: DriveService, folder_id: str, target_root_id: str) -> bool:
    """Check-parent-before-move. Returns False when the folder already sits under the target."""
    try:
        parents = await call_external("drive.get_parents", drive.get_parents(folder_id))
    except ExternalServiceError as e:
        log.warning("parent probe for %s failed (%s); moving anyway", folder_id, e)
        parents = []
    if target_root_id in parents:
        log.info("folder %s already under %s; skipping move", folder_id, target_root_id)
        return False
    await call_external("drive.move_folder", drive.move_folder(folder_id, target_root_id))
    log.info("moved folder %s to %s", folder_id, target_root_id)
    return True


async def provision_phase_two(drive: DriveService, case: FolderHandle) -> FolderSet:
    """Phase-two folders live under the case's Internal folder (created if it went missing)."""
    internal = await find_or_create_folder(drive, "Internal", case.id)
    subfolders = {"Internal": internal}
    for name in PHASE_TWO_SUBFOLDERS:
        subfolders[name] = await find_or_create_folder(drive, name, internal.id)
    return FolderSet(case=case, subfolders=subfolders)


async def move_documents_to_data_room(drive: DriveService, folders: FolderSet) -> list[FileHandle]:
    """Phase-one documents left loose in Internal go to Data Room; subfolders stay."""
    internal_id = folders.folder_id("Internal")
    try:
        files = await call_external("drive.list_files", drive.list_files(internal_id))
    except ExternalServiceError as e:
        log.warning("listing %s failed (%s); nothing moved to Data Room", internal_id, e)
        return []

    data_room_id = folders.folder_id("Data Room")
    moved: list[FileHandle] = []
    for f in files:
        if f.mime_type == FOLDER_MIME:
            continue
        await call_external("drive.move_file", drive.move_file(f.id, data_room_id))
        moved.append(f)
    if moved:
        log.info("moved %d document(s) into Data Room", len(moved))
    return moved
