# leaddocs/adapters/repos/leads.py
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import Any

from ...domain.parsing import to_int
from ...domain.policies import can_transition, ensure_transition
from ...domain.types import LeadRecord, LeadStatus
from ...errors import LeadNotFoundError, RecordStoreError, VersionConflictError
from ..base import RowStore

log = logging.getLogger(__name__)

HEADERS: list[str] = [
    "lead_id",
    "status",
    "business_legal_name",
    "phase1_folder_id",
    "phase2_folder_id",
    "phase1_submission_data_json",
    "phase2_submission_data_json",
    "created_at",
    "last_updated",
    "error_details",
    "retry_count",
    "row_version",
]

JSON_COLUMNS = {"phase1_submission_data_json", "phase2_submission_data_json"}

LAST_COLUMN = chr(ord("A") + len(HEADERS) - 1)  # "L"


def loads_object(raw: str | None) -> dict[str, Any]:
    """JSON snapshot column -> dict. Anything unparsable degrades to {}."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except Exception:
        log.warning("unparsable JSON snapshot column; treating as empty")
        return {}
    return data if isinstance(data, dict) else {}


def dumps_object(data: Any) -> str:
    if isinstance(data, str):
        return data
    return json.dumps(data or {}, ensure_ascii=False, default=str)


def parse_ts(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def to_status(raw: str | None) -> LeadStatus:
    try:
        return LeadStatus((raw or "").strip())
    except ValueError:
        raise RecordStoreError(f"unknown lead status in store: {raw!r}")


class SheetLeadStore:
    """
    Lead lifecycle rows in a spreadsheet tab (one header row, one row per lead).

    Reads are full scans; writes rewrite one row. A sheet cannot do a conditional
    write, so row_version is re-read and compared right before each update. That
    narrows the lost-update window but cannot close it; SqlLeadStore does.
    """

    def __init__(self, rows: RowStore, sheet_id: str, sheet_name: str = "LeadTracking"):
        if not sheet_id:
            raise RecordStoreError("lead tracking sheet id is not configured")
        self.rows = rows
        self.sheet_id = sheet_id
        self.sheet_name = sheet_name

    # -------------------------
    # ranges
    # -------------------------
    def _all(self) -> str:
        return f"{self.sheet_name}!A:{LAST_COLUMN}"

    def _row(self, n: int) -> str:
        return f"{self.sheet_name}!A{n}:{LAST_COLUMN}{n}"

    # -------------------------
    # scanning
    # -------------------------
    async def ensure_headers(self) -> None:
        """Check-then-create. Also widens a legacy 11-column header."""
        first = await self.rows.read_rows(self.sheet_id, self._row(1))
        if not first or not any(first[0]):
            await self.rows.update_row(self.sheet_id, self._row(1), HEADERS)
            log.info("wrote lead tracking header row to %s", self.sheet_name)
            return
        header = first[0]
        if header[0] == "lead_id" and len(header) < len(HEADERS):
            await self.rows.update_row(self.sheet_id, self._row(1), HEADERS)

    async def _scan(self) -> list[tuple[int, dict[str, str]]]:
        """[(sheet row number, {column: cell})] for every data row."""
        rows = await self.rows.read_rows(self.sheet_id, self._all())
        if not rows:
            return []
        if rows[0] and rows[0][0] == "lead_id":
            header, data, start = rows[0], rows[1:], 2
        else:
            header, data, start = HEADERS, rows, 1
        out: list[tuple[int, dict[str, str]]] = []
        for i, row in enumerate(data):
            if not row or not row[0]:
                continue
            cells = {col: (row[j] if j < len(row) else "") for j, col in enumerate(header)}
            out.append((start + i, cells))
        return out

    async def _find(self, lead_id: str) -> tuple[int, dict[str, str]]:
        for n, cells in await self._scan():
            if cells.get("lead_id") == lead_id:
                return n, cells
        raise LeadNotFoundError(lead_id)

    @staticmethod
    def _record(cells: dict[str, str]) -> LeadRecord:
        return LeadRecord(
            lead_id=cells["lead_id"],
            status=to_status(cells.get("status")),
            business_legal_name=cells.get("business_legal_name") or "",
            phase1_folder_id=cells.get("phase1_folder_id") or None,
            phase2_folder_id=cells.get("phase2_folder_id") or None,
            phase1_submission_data=loads_object(cells.get("phase1_submission_data_json")),
            phase2_submission_data=loads_object(cells.get("phase2_submission_data_json")),
            created_at=parse_ts(cells.get("created_at")),
            last_updated=parse_ts(cells.get("last_updated")),
            error_details=cells.get("error_details") or None,
            retry_count=to_int(cells.get("retry_count")) or 0,
            row_version=to_int(cells.get("row_version")) or 1,
        )

    # -------------------------
    # operations
    # -------------------------
    async def create_lead(
        self, *, business_legal_name: str, phase1_folder_id: str, phase1_data: dict[str, Any]
    ) -> str:
        await self.ensure_headers()
        lead_id = str(uuid.uuid4())
        now = datetime.utcnow().isoformat()
        cells = {
            "lead_id": lead_id,
            "status": LeadStatus.PHASE_1_COMPLETE.value,
            "business_legal_name": business_legal_name,
            "phase1_folder_id": phase1_folder_id,
            "phase2_folder_id": "",
            "phase1_submission_data_json": dumps_object(phase1_data),
            "phase2_submission_data_json": "",
            "created_at": now,
            "last_updated": now,
            "error_details": "",
            "retry_count": "0",
            "row_version": "1",
        }
        await self.rows.append_row(self.sheet_id, self._all(), [cells[h] for h in HEADERS])
        log.info("created lead %s for %s", lead_id, business_legal_name)
        return lead_id

    async def get_lead_by_id(self, lead_id: str) -> LeadRecord | None:
        try:
            _, cells = await self._find(lead_id)
        except LeadNotFoundError:
            return None
        return self._record(cells)

    async def find_lead_by_folder(self, phase1_folder_id: str) -> LeadRecord | None:
        for _, cells in await self._scan():
            if cells.get("phase1_folder_id") == phase1_folder_id:
                return self._record(cells)
        return None

    async def get_leads_by_status(self, status: LeadStatus) -> list[LeadRecord]:
        return [self._record(c) for _, c in await self._scan() if c.get("status") == status.value]

    async def update_lead_status(
        self,
        lead_id: str,
        status: LeadStatus,
        updates: dict[str, Any] | None = None,
        *,
        expected_version: int | None = None,
    ) -> LeadRecord:
        n, cells = await self._find(lead_id)
        current = self._record(cells)
        if status != current.status:
            ensure_transition(current.status, status)
        if expected_version is not None and current.row_version != expected_version:
            raise VersionConflictError(lead_id, expected_version, current.row_version)

        new = {h: cells.get(h, "") for h in HEADERS}
        for col, value in (updates or {}).items():
            if col not in new or col in ("lead_id", "row_version"):
                continue
            new[col] = dumps_object(value) if col in JSON_COLUMNS else ("" if value is None else str(value))
        new["status"] = status.value
        new["last_updated"] = datetime.utcnow().isoformat()
        new["row_version"] = str(current.row_version + 1)

        # Last look before the blind write.
        _, latest = await self._find(lead_id)
        if (to_int(latest.get("row_version")) or 1) != current.row_version:
            raise VersionConflictError(lead_id, current.row_version, to_int(latest.get("row_version")))

        await self.rows.update_row(self.sheet_id, self._row(n), [new[h] for h in HEADERS])
        log.info("lead %s: %s -> %s", lead_id, current.status.value, status.value)
        return self._record(new)

    async def record_error(self, lead_id: str, message: str) -> None:
        """Best effort: a failure here is logged and swallowed."""
        try:
            n, cells = await self._find(lead_id)
            current = self._record(cells)
            new = {h: cells.get(h, "") for h in HEADERS}
            if current.status == LeadStatus.ERROR or can_transition(current.status, LeadStatus.ERROR):
                new["status"] = LeadStatus.ERROR.value
            new["error_details"] = message[:1000]
            new["retry_count"] = str(current.retry_count + 1)
            new["last_updated"] = datetime.utcnow().isoformat()
            new["row_version"] = str(current.row_version + 1)
            await self.rows.update_row(self.sheet_id, self._row(n), [new[h] for h in HEADERS])
            log.error("lead %s marked %s: %s", lead_id, new["status"], message)
        except Exception:
            log.exception("failed to record error for lead %s", lead_id)
