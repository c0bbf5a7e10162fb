from leaddocs.adapters.memory import InMemoryDrive
from leaddocs.domain.types import FolderHandle
from leaddocs.service_layer.provisioning import (
    PHASE_TWO_SUBFOLDERS,
    move_case_folder,
    move_documents_to_data_room,
    provision_phase_one,
    provision_phase_two,
)


def _drive():
    drive = InMemoryDrive()
    drive.add_root("p1", "Leads - Phase 1")
    drive.add_root("p2", "Leads - Phase 2")
    return drive


async def test_phase_one_folders_are_found_not_duplicated():
    drive = _drive()
    first = await provision_phase_one(drive, "Acme", "p1")
    second = await provision_phase_one(drive, "Acme", "p1")

    assert first.case.id == second.case.id
    assert first.folder_id("Internal") == second.folder_id("Internal")
    assert [c.name for c in drive.children("p1")] == ["Acme"]
    assert sorted(c.name for c in drive.children(first.case.id)) == ["External", "Internal"]


async def test_failed_probe_falls_back_to_create():
    drive = _drive()
    drive.fail_operations.add("drive.find_folder")
    folders = await provision_phase_one(drive, "Acme", "p1")
    assert folders.case.name == "Acme"


async def test_moving_twice_leaves_one_folder_under_target():
    drive = _drive()
    folders = await provision_phase_one(drive, "Acme", "p1")

    assert await move_case_folder(drive, folders.case.id, "p2") is True
    assert await move_case_folder(drive, folders.case.id, "p2") is False

    assert [c.id for c in drive.children("p2")] == [folders.case.id]
    assert drive.children("p1") == []
    assert drive.calls.count("drive.move_folder") == 1


async def test_phase_two_folders_and_data_room_sweep():
    drive = _drive()
    p1 = await provision_phase_one(drive, "Acme", "p1")
    doc = await drive.upload_file(p1.folder_id("Internal"), "Acme - MNDA", b"", "application/pdf")

    folders = await provision_phase_two(drive, FolderHandle(id=p1.case.id, name="Acme"))
    assert folders.folder_id("Internal") == p1.folder_id("Internal")
    names = {c.name for c in drive.children(folders.folder_id("Internal"))}
    assert set(PHASE_TWO_SUBFOLDERS) <= names

    moved = await move_documents_to_data_room(drive, folders)
    assert [f.id for f in moved] == [doc.id]
    assert drive.items[doc.id].parents == [folders.folder_id("Data Room")]

    again = await provision_phase_two(drive, FolderHandle(id=p1.case.id, name="Acme"))
    assert again.subfolders == folders.subfolders
    assert await move_documents_to_data_room(drive, again) == []
