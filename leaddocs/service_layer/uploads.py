from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Mapping

from ..adapters.base import DriveService, FileFetcher
from ..domain.field_map import UPLOAD_FIELDS, label_key
from ..domain.types import FileHandle, FolderSet
from ..errors import ExternalServiceError, LeadDocsError
from .guard import call_external

log = logging.getLogger(__name__)

ALLOWED_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".txt": "text/plain",
}

MAX_NAME = 255

_UNSAFE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class UploadRejected(LeadDocsError):
    pass


@dataclass(frozen=True)
class UploadRequest:
    field: str
    url: str
    filename: str | None
    folder_name: str


@dataclass
class UploadReport:
    uploaded: list[FileHandle] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "uploaded": [{"id": f.id, "name": f.name} for f in self.uploaded],
            "skipped": list(self.skipped),
            "failed": list(self.failed),
        }


def sanitize_filename(name: str) -> str:
    s = _UNSAFE.sub("_", name or "").replace("..", "_").strip().lstrip(".")
    if not s:
        s = "upload"
    if len(s) > MAX_NAME:
        suffix = PurePosixPath(s).suffix[:16]
        s = s[: MAX_NAME - len(suffix)] + suffix
    return s


def collect_uploads(raw: Mapping[str, Any]) -> list[UploadRequest]:
    """Upload answers look like [{"url": ..., "filename": ...}, ...] (or a bare URL string)."""
    out: list[UploadRequest] = []
    for label, value in raw.items():
        key = label_key(label)
        folder = UPLOAD_FIELDS.get(key)
        if folder is None or value is None:
            continue
        items = value if isinstance(value, list) else [value]
        for item in items:
            if isinstance(item, dict) and item.get("url"):
                out.append(UploadRequest(key, str(item["url"]), item.get("filename") or item.get("name"), folder))
            elif isinstance(item, str) and item.startswith(("http://", "https://")):
                out.append(UploadRequest(key, item, None, folder))
    return out


def check_upload(name: str, size: int, max_bytes: int) -> str:
    """Returns the MIME type to store with, or raises UploadRejected."""
    if size > max_bytes:
        raise UploadRejected(f"{name}: {size} bytes exceeds limit of {max_bytes}")
    ext = PurePosixPath(name).suffix.lower()
    mime = ALLOWED_TYPES.get(ext)
    if mime is None:
        raise UploadRejected(f"{name}: file type {ext or '(none)'} not allowed")
    return mime


async def route_uploads(
    drive: DriveService,
    fetcher: FileFetcher,
    raw: Mapping[str, Any],
    folders: FolderSet,
    *,
    max_bytes: int,
) -> UploadReport:
    """
    Fetch each uploaded file and store it under its phase-two folder. A name already
    present in the target folder is skipped; a failed file is reported and the rest continue.
    """
    report = UploadReport()
    existing: dict[str, set[str]] = {}

    for req in collect_uploads(raw):
        folder_id = folders.folder_id(req.folder_name)
        if folder_id not in existing:
            try:
                listed = await call_external("drive.list_files", drive.list_files(folder_id))
                existing[folder_id] = {f.name for f in listed}
            except ExternalServiceError as e:
                log.warning("listing %s failed (%s); assuming empty", req.folder_name, e)
                existing[folder_id] = set()

        name = sanitize_filename(req.filename) if req.filename else None
        if name and name in existing[folder_id]:
            log.info("upload %s already in %s; skipping", name, req.folder_name)
            report.skipped.append(name)
            continue

        try:
            fetched = await call_external("files.fetch", fetcher.fetch(req.url))
            name = name or sanitize_filename(fetched.filename)
            if name in existing[folder_id]:
                log.info("upload %s already in %s; skipping", name, req.folder_name)
                report.skipped.append(name)
                continue
            mime = check_upload(name, len(fetched.content), max_bytes)
            handle = await call_external(
                "drive.upload_file", drive.upload_file(folder_id, name, fetched.content, mime)
            )
        except (ExternalServiceError, UploadRejected) as e:
            log.warning("upload for %s failed: %s", req.field, e)
            report.failed.append({"field": req.field, "url": req.url, "error": str(e)})
            continue

        existing[folder_id].add(name)
        report.uploaded.append(handle)
        log.info("uploaded %s to %s", name, req.folder_name)

    return report
