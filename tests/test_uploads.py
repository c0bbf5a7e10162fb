import pytest

from leaddocs.adapters.base import FetchedFile
from leaddocs.adapters.memory import InMemoryDrive, InMemoryFiles
from leaddocs.domain.types import FolderHandle
from leaddocs.service_layer.provisioning import provision_phase_two
from leaddocs.service_layer.uploads import (
    UploadRejected,
    check_upload,
    collect_uploads,
    route_uploads,
    sanitize_filename,
)


def test_sanitize_filename():
    cleaned = sanitize_filename("../../etc/passwd")
    assert "/" not in cleaned and ".." not in cleaned
    assert sanitize_filename("") == "upload"
    assert len(sanitize_filename("a" * 400 + ".pdf")) == 255
    assert sanitize_filename("a" * 400 + ".pdf").endswith(".pdf")


def test_check_upload_limits():
    assert check_upload("fs.pdf", 10, 100) == "application/pdf"
    with pytest.raises(UploadRejected):
        check_upload("fs.pdf", 101, 100)
    with pytest.raises(UploadRejected):
        check_upload("tool.exe", 10, 100)


def test_collect_uploads_routes_by_field():
    reqs = collect_uploads(
        {
            "Cap Table": [{"url": "https://f/cap.xlsx", "filename": "cap.xlsx"}],
            "Project Pictures": "https://f/site.png",
            "Business Name": "Acme",
        }
    )
    assert [(r.folder_name, r.filename) for r in reqs] == [("Escrow Account", "cap.xlsx"), ("Content", None)]


async def _phase_two_folders(drive):
    drive.add_root("case-1", "Acme")
    return await provision_phase_two(drive, FolderHandle(id="case-1", name="Acme"))


async def test_route_uploads_skips_existing_and_reports_failures():
    drive = InMemoryDrive()
    folders = await _phase_two_folders(drive)
    await drive.upload_file(folders.folder_id("Escrow Account"), "cap.xlsx", b"old", None)
    files = InMemoryFiles(
        {
            "https://f/fs.pdf": FetchedFile(b"%PDF", "fs.pdf", "application/pdf"),
            "https://f/site.png": FetchedFile(b"png", "site.png", "image/png"),
        }
    )

    report = await route_uploads(
        drive,
        files,
        {
            "Cap Table": [{"url": "https://f/cap.xlsx", "filename": "cap.xlsx"}],
            "Financial Statements": [
                {"url": "https://f/fs.pdf", "filename": "fs.pdf"},
                {"url": "https://f/missing.pdf", "filename": "missing.pdf"},
            ],
            "Project Pictures": "https://f/site.png",
        },
        folders,
        max_bytes=1024,
    )

    assert report.skipped == ["cap.xlsx"]
    assert sorted(f.name for f in report.uploaded) == ["fs.pdf", "site.png"]
    assert len(report.failed) == 1 and report.failed[0]["url"] == "https://f/missing.pdf"
    content = [c.name for c in drive.children(folders.folder_id("Content"))]
    assert content == ["site.png"]

    again = await route_uploads(
        drive, files, {"Financial Statements": [{"url": "https://f/fs.pdf", "filename": "fs.pdf"}]}, folders, max_bytes=1024
    )
    assert again.uploaded == [] and again.skipped == ["fs.pdf"]
