from __future__ import annotations

import itertools
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..config import settings
from ..domain.replacements import render_text
from ..domain.types import DocumentHandle, FileHandle, FolderHandle
from ..errors import ExternalServiceError
from .base import FetchedFile
from .clients.google_drive import FOLDER_MIME

DOC_MIME = "application/vnd.google-apps.document"

_A1 = re.compile(r"^(?:(?P<tab>.+)!)?(?P<c1>[A-Z]+)(?P<r1>\d*)(?::(?P<c2>[A-Z]+)(?P<r2>\d*))?$")


def _col_index(col: str) -> int:
    n = 0
    for ch in col:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def parse_a1(range_spec: str) -> tuple[str, int, int, int | None]:
    """'Tab!A5:L5' -> (tab, first_col, last_col, row or None)."""
    m = _A1.match(range_spec.strip())
    if not m:
        raise ValueError(f"unsupported range: {range_spec}")
    tab = (m.group("tab") or "Sheet1").strip("'")
    c1 = _col_index(m.group("c1"))
    c2 = _col_index(m.group("c2") or m.group("c1"))
    row = int(m.group("r1")) if m.group("r1") else None
    return tab, c1, c2, row


@dataclass
class _Item:
    id: str
    name: str
    mime_type: str
    parents: list[str]
    text: str = ""


@dataclass
class InMemoryDrive:
    """Folder/file tree with Drive semantics; used by the dev workspace and tests."""

    items: dict[str, _Item] = field(default_factory=dict)
    fail_operations: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_operations:
            raise ExternalServiceError(operation, "injected failure")

    def add_root(self, folder_id: str, name: str = "root") -> None:
        self.items[folder_id] = _Item(folder_id, name, FOLDER_MIME, [])

    def _link(self, item_id: str) -> str:
        return f"https://drive.example/{item_id}"

    def children(self, parent_id: str) -> list[_Item]:
        return [it for it in self.items.values() if parent_id in it.parents]

    async def create_folder(self, name: str, parent_id: str | None = None) -> FolderHandle:
        self._check("drive.create_folder")
        fid = self.new_id("folder")
        self.items[fid] = _Item(fid, name, FOLDER_MIME, [parent_id] if parent_id else [])
        return FolderHandle(id=fid, name=name, view_link=self._link(fid))

    async def find_folder(self, name: str, parent_id: str) -> FolderHandle | None:
        self._check("drive.find_folder")
        for it in self.children(parent_id):
            if it.mime_type == FOLDER_MIME and it.name == name:
                return FolderHandle(id=it.id, name=it.name, view_link=self._link(it.id))
        return None

    async def get_parents(self, item_id: str) -> list[str]:
        self._check("drive.get_parents")
        if item_id not in self.items:
            raise ExternalServiceError("drive.get_parents", f"not found: {item_id}")
        return list(self.items[item_id].parents)

    async def _reparent(self, item_id: str, new_parent_id: str, operation: str) -> dict[str, Any]:
        self._check(operation)
        if item_id not in self.items:
            raise ExternalServiceError(operation, f"not found: {item_id}")
        self.items[item_id].parents = [new_parent_id]
        return {"id": item_id, "parents": [new_parent_id]}

    async def move_folder(self, folder_id: str, new_parent_id: str) -> dict[str, Any]:
        return await self._reparent(folder_id, new_parent_id, "drive.move_folder")

    async def move_file(self, file_id: str, new_parent_id: str) -> dict[str, Any]:
        return await self._reparent(file_id, new_parent_id, "drive.move_file")

    async def list_files(self, parent_id: str) -> list[FileHandle]:
        self._check("drive.list_files")
        return [
            FileHandle(id=it.id, name=it.name, mime_type=it.mime_type, view_link=self._link(it.id))
            for it in self.children(parent_id)
        ]

    async def upload_file(self, parent_id: str, name: str, content: bytes, mime_type: str | None) -> FileHandle:
        self._check("drive.upload_file")
        fid = self.new_id("file")
        self.items[fid] = _Item(fid, name, mime_type or "application/octet-stream", [parent_id])
        return FileHandle(id=fid, name=name, mime_type=mime_type, view_link=self._link(fid))


@dataclass
class InMemoryDocs:
    """Template copies live in the drive tree; their text is what replacements act on."""

    drive: InMemoryDrive
    templates: dict[str, str] = field(default_factory=dict)
    failing_templates: set[str] = field(default_factory=set)
    fail_replace: bool = False
    replace_calls: list[str] = field(default_factory=list)

    async def copy_template(self, template_id: str, name: str, parent_id: str) -> DocumentHandle:
        self.drive.calls.append("docs.copy_template")
        if template_id in self.failing_templates:
            raise ExternalServiceError("docs.copy_template", f"template {template_id} unavailable")
        did = self.drive.new_id("doc")
        self.drive.items[did] = _Item(did, name, DOC_MIME, [parent_id], self.templates.get(template_id, ""))
        return DocumentHandle(id=did, name=name, view_link=f"https://docs.example/{did}")

    async def batch_replace_text(self, document_id: str, replacements: Mapping[str, str]) -> None:
        self.replace_calls.append(document_id)
        if self.fail_replace:
            raise ExternalServiceError("docs.batch_replace_text", "injected failure")
        item = self.drive.items.get(document_id)
        if item is None:
            raise ExternalServiceError("docs.batch_replace_text", f"not found: {document_id}")
        item.text = render_text(item.text, replacements, safe_only=settings.SAFE_LITERALS_ONLY)

    def text_of(self, document_id: str) -> str:
        return self.drive.items[document_id].text


@dataclass
class InMemorySheets:
    tabs: dict[tuple[str, str], list[list[str]]] = field(default_factory=dict)
    fail_operations: set[str] = field(default_factory=set)

    def _check(self, operation: str) -> None:
        if operation in self.fail_operations:
            raise ExternalServiceError(operation, "injected failure")

    def rows(self, store_id: str, tab: str) -> list[list[str]]:
        return self.tabs.setdefault((store_id, tab), [])

    async def read_rows(self, store_id: str, range_spec: str) -> list[list[str]]:
        self._check("sheets.read_rows")
        tab, c1, c2, row = parse_a1(range_spec)
        rows = self.rows(store_id, tab)
        picked = rows if row is None else rows[row - 1 : row]
        out = [list(r[c1 : c2 + 1]) for r in picked]
        # The values API drops trailing empty rows.
        while out and not any(out[-1]):
            out.pop()
        return out

    async def append_row(self, store_id: str, range_spec: str, row: list[str]) -> None:
        self._check("sheets.append_row")
        tab, _, _, _ = parse_a1(range_spec)
        self.rows(store_id, tab).append([str(c) for c in row])

    async def update_row(self, store_id: str, range_spec: str, row: list[str]) -> None:
        self._check("sheets.update_row")
        tab, c1, _, row_no = parse_a1(range_spec)
        if row_no is None:
            raise ValueError(f"update needs a row number: {range_spec}")
        rows = self.rows(store_id, tab)
        while len(rows) < row_no:
            rows.append([])
        target = rows[row_no - 1]
        while len(target) < c1 + len(row):
            target.append("")
        target[c1 : c1 + len(row)] = [str(c) for c in row]


@dataclass
class InMemoryFiles:
    files: dict[str, FetchedFile] = field(default_factory=dict)

    async def fetch(self, url: str) -> FetchedFile:
        f = self.files.get(url)
        if f is None:
            raise ExternalServiceError("files.fetch", f"not found: {url}")
        return f
