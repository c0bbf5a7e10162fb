# leaddocs/adapters/clients/google_sheets.py
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from ...config import settings
from .http_resilience import bearer_headers, resilient_request


@dataclass
class GoogleSheetsClient:
    """Sheets v4 values API; every cell is written RAW so JSON columns stay verbatim."""

    base_url: str

    @classmethod
    def from_settings(cls) -> "GoogleSheetsClient":
        return cls(base_url=settings.GOOGLE_SHEETS_BASE_URL)

    def _values_url(self, store_id: str, range_spec: str, suffix: str = "") -> str:
        return f"{self.base_url}/spreadsheets/{store_id}/values/{quote(range_spec, safe='')}{suffix}"

    async def read_rows(self, store_id: str, range_spec: str) -> list[list[str]]:
        resp = await resilient_request(
            "GET",
            self._values_url(store_id, range_spec),
            operation="sheets.read_rows",
            headers=bearer_headers(),
        )
        rows = resp.json().get("values") or []
        return [[str(c) for c in row] for row in rows]

    async def append_row(self, store_id: str, range_spec: str, row: list[str]) -> None:
        await resilient_request(
            "POST",
            self._values_url(store_id, range_spec, ":append"),
            operation="sheets.append_row",
            headers=bearer_headers(),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": [row]},
        )

    async def update_row(self, store_id: str, range_spec: str, row: list[str]) -> None:
        await resilient_request(
            "PUT",
            self._values_url(store_id, range_spec),
            operation="sheets.update_row",
            headers=bearer_headers(),
            params={"valueInputOption": "RAW"},
            json={"values": [row]},
        )
