# leaddocs/adapters/clients/google_drive.py
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any

from ...config import settings
from ...domain.types import FileHandle, FolderHandle
from .http_resilience import bearer_headers, resilient_request

FOLDER_MIME = "application/vnd.google-apps.folder"

_FILE_FIELDS = "id,name,mimeType,webViewLink"


def _q_literal(s: str) -> str:
    # Drive query strings are single-quoted; escape backslash first, then quote.
    return "'" + s.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _folder(d: dict[str, Any]) -> FolderHandle:
    return FolderHandle(id=d["id"], name=d.get("name") or "", view_link=d.get("webViewLink"))


def _file(d: dict[str, Any]) -> FileHandle:
    return FileHandle(
        id=d["id"],
        name=d.get("name") or "",
        mime_type=d.get("mimeType"),
        view_link=d.get("webViewLink"),
    )


@dataclass
class GoogleDriveClient:
    """Drive v3 over plain REST (shared drives enabled)."""

    base_url: str
    upload_url: str

    @classmethod
    def from_settings(cls) -> "GoogleDriveClient":
        return cls(base_url=settings.GOOGLE_DRIVE_BASE_URL, upload_url=settings.GOOGLE_UPLOAD_BASE_URL)

    def _params(self, **extra: Any) -> dict[str, Any]:
        p: dict[str, Any] = {"supportsAllDrives": "true"}
        p.update(extra)
        return p

    async def create_folder(self, name: str, parent_id: str | None = None) -> FolderHandle:
        body: dict[str, Any] = {"name": name, "mimeType": FOLDER_MIME}
        if parent_id:
            body["parents"] = [parent_id]
        resp = await resilient_request(
            "POST",
            f"{self.base_url}/files",
            operation="drive.create_folder",
            headers=bearer_headers(),
            params=self._params(fields="id,name,webViewLink"),
            json=body,
        )
        return _folder(resp.json())

    async def find_folder(self, name: str, parent_id: str) -> FolderHandle | None:
        q = (
            f"name = {_q_literal(name)} and {_q_literal(parent_id)} in parents "
            f"and mimeType = '{FOLDER_MIME}' and trashed = false"
        )
        resp = await resilient_request(
            "GET",
            f"{self.base_url}/files",
            operation="drive.find_folder",
            headers=bearer_headers(),
            params=self._params(q=q, fields="files(id,name,webViewLink)", includeItemsFromAllDrives="true"),
        )
        files = resp.json().get("files") or []
        return _folder(files[0]) if files else None

    async def get_parents(self, item_id: str) -> list[str]:
        resp = await resilient_request(
            "GET",
            f"{self.base_url}/files/{item_id}",
            operation="drive.get_parents",
            headers=bearer_headers(),
            params=self._params(fields="parents"),
        )
        return list(resp.json().get("parents") or [])

    async def _reparent(self, item_id: str, new_parent_id: str, operation: str) -> dict[str, Any]:
        old = await self.get_parents(item_id)
        resp = await resilient_request(
            "PATCH",
            f"{self.base_url}/files/{item_id}",
            operation=operation,
            headers=bearer_headers(),
            params=self._params(addParents=new_parent_id, removeParents=",".join(old), fields="id,parents"),
            json={},
        )
        data = resp.json()
        return {"id": data.get("id", item_id), "parents": data.get("parents") or [new_parent_id]}

    async def move_folder(self, folder_id: str, new_parent_id: str) -> dict[str, Any]:
        return await self._reparent(folder_id, new_parent_id, "drive.move_folder")

    async def move_file(self, file_id: str, new_parent_id: str) -> dict[str, Any]:
        return await self._reparent(file_id, new_parent_id, "drive.move_file")

    async def list_files(self, parent_id: str) -> list[FileHandle]:
        out: list[FileHandle] = []
        page_token: str | None = None
        while True:
            params = self._params(
                q=f"{_q_literal(parent_id)} in parents and trashed = false",
                fields=f"nextPageToken,files({_FILE_FIELDS})",
                pageSize=1000,
                includeItemsFromAllDrives="true",
            )
            if page_token:
                params["pageToken"] = page_token
            resp = await resilient_request(
                "GET", f"{self.base_url}/files", operation="drive.list_files", headers=bearer_headers(), params=params
            )
            data = resp.json()
            out.extend(_file(f) for f in data.get("files") or [])
            page_token = data.get("nextPageToken")
            if not page_token:
                return out

    async def upload_file(self, parent_id: str, name: str, content: bytes, mime_type: str | None) -> FileHandle:
        # Drive wants multipart/related: JSON metadata part, then the media part.
        boundary = f"leaddocs-{uuid.uuid4().hex}"
        mime = mime_type or "application/octet-stream"
        meta = json.dumps({"name": name, "parents": [parent_id]}).encode("utf-8")
        body = b"".join(
            [
                f"--{boundary}\r\nContent-Type: application/json; charset=UTF-8\r\n\r\n".encode(),
                meta,
                f"\r\n--{boundary}\r\nContent-Type: {mime}\r\n\r\n".encode(),
                content,
                f"\r\n--{boundary}--".encode(),
            ]
        )
        headers = bearer_headers()
        headers["Content-Type"] = f"multipart/related; boundary={boundary}"
        resp = await resilient_request(
            "POST",
            f"{self.upload_url}/files",
            operation="drive.upload_file",
            headers=headers,
            params=self._params(uploadType="multipart", fields=_FILE_FIELDS),
            content=body,
        )
        return _file(resp.json())
