from __future__ import annotations

import logging
from datetime import datetime

from ..adapters.base import RowStore
from ..adapters.repos.leads import parse_ts
from ..domain.field_map import label_key
from ..errors import ExternalServiceError
from .guard import call_external

log = logging.getLogger(__name__)


def _column(header: list[str], *candidates: str) -> int | None:
    for cand in candidates:
        for i, h in enumerate(header):
            if h == cand:
                return i
    for cand in candidates:
        for i, h in enumerate(header):
            if cand in h:
                return i
    return None


def _when(raw: str) -> datetime:
    ts = parse_ts(raw)
    return ts.replace(tzinfo=None) if ts else datetime.min


async def find_previous_submission(
    rows: RowStore,
    sheet_id: str,
    sheet_name: str,
    *,
    email: str | None = None,
    first_name: str | None = None,
) -> dict[str, str] | None:
    """
    Newest earlier intake row for the same person (email first, else first name),
    keyed by the sheet's own column labels. Lookup failures mean "not a returning customer".
    """
    email = (email or "").strip().lower()
    first_name = (first_name or "").strip().lower()
    if not (email or first_name):
        return None

    try:
        data = await call_external("sheets.read_rows", rows.read_rows(sheet_id, f"{sheet_name}!A:ZZ"))
    except ExternalServiceError as e:
        log.warning("previous projects lookup failed (%s); continuing without it", e)
        return None
    if len(data) < 2:
        return None

    labels = data[0]
    header = [label_key(h) for h in labels]
    email_col = _column(header, "email_poc", "email")
    name_col = _column(header, "first_name_poc", "first_name")
    time_col = _column(header, "submission_time", "submission_date", "submitted_at")

    def cell(row: list[str], col: int | None) -> str:
        return row[col].strip() if col is not None and col < len(row) else ""

    if email and email_col is not None:
        matches = [r for r in data[1:] if cell(r, email_col).lower() == email]
    elif first_name and name_col is not None:
        matches = [r for r in data[1:] if cell(r, name_col).lower() == first_name]
    else:
        matches = []
    if not matches:
        return None

    newest = max(reversed(matches), key=lambda r: _when(cell(r, time_col))) if time_col is not None else matches[-1]
    log.info("returning customer: found previous submission for %s", email or first_name)
    return {labels[i]: newest[i] for i in range(min(len(labels), len(newest))) if newest[i]}
