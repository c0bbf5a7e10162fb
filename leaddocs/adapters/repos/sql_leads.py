# leaddocs/adapters/repos/sql_leads.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...domain.policies import can_transition, ensure_transition
from ...domain.types import LeadRecord, LeadStatus
from ...errors import LeadNotFoundError, VersionConflictError
from ...models import LeadRow
from .leads import JSON_COLUMNS, dumps_object, loads_object

log = logging.getLogger(__name__)

_PLAIN_COLUMNS = {
    "business_legal_name",
    "phase1_folder_id",
    "phase2_folder_id",
    "error_details",
    "retry_count",
}


def _record(row: LeadRow) -> LeadRecord:
    return LeadRecord(
        lead_id=row.lead_id,
        status=row.status,
        business_legal_name=row.business_legal_name or "",
        phase1_folder_id=row.phase1_folder_id,
        phase2_folder_id=row.phase2_folder_id,
        phase1_submission_data=loads_object(row.phase1_submission_data_json),
        phase2_submission_data=loads_object(row.phase2_submission_data_json),
        created_at=row.created_at,
        last_updated=row.last_updated,
        error_details=row.error_details,
        retry_count=row.retry_count or 0,
        row_version=row.row_version or 1,
    )


class SqlLeadStore:
    """
    Same contract as SheetLeadStore on a SQL table. Every status write is
    UPDATE ... WHERE row_version = :seen, so a concurrent writer makes the
    second update fail with VersionConflictError instead of being lost.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def create_lead(
        self, *, business_legal_name: str, phase1_folder_id: str, phase1_data: dict[str, Any]
    ) -> str:
        lead_id = str(uuid.uuid4())
        now = datetime.utcnow()
        async with self.session_maker() as session:
            session.add(
                LeadRow(
                    lead_id=lead_id,
                    status=LeadStatus.PHASE_1_COMPLETE,
                    business_legal_name=business_legal_name,
                    phase1_folder_id=phase1_folder_id,
                    phase2_folder_id=None,
                    phase1_submission_data_json=dumps_object(phase1_data),
                    phase2_submission_data_json="{}",
                    created_at=now,
                    last_updated=now,
                    retry_count=0,
                    row_version=1,
                )
            )
            await session.commit()
        log.info("created lead %s for %s", lead_id, business_legal_name)
        return lead_id

    async def get_lead_by_id(self, lead_id: str) -> LeadRecord | None:
        async with self.session_maker() as session:
            row = await session.get(LeadRow, lead_id)
            return _record(row) if row is not None else None

    async def find_lead_by_folder(self, phase1_folder_id: str) -> LeadRecord | None:
        async with self.session_maker() as session:
            q = select(LeadRow).where(LeadRow.phase1_folder_id == phase1_folder_id).order_by(LeadRow.created_at)
            row = (await session.execute(q)).scalars().first()
            return _record(row) if row is not None else None

    async def get_leads_by_status(self, status: LeadStatus) -> list[LeadRecord]:
        async with self.session_maker() as session:
            q = select(LeadRow).where(LeadRow.status == status).order_by(LeadRow.created_at)
            return [_record(r) for r in (await session.execute(q)).scalars().all()]

    async def update_lead_status(
        self,
        lead_id: str,
        status: LeadStatus,
        updates: dict[str, Any] | None = None,
        *,
        expected_version: int | None = None,
    ) -> LeadRecord:
        async with self.session_maker() as session:
            row = await session.get(LeadRow, lead_id)
            if row is None:
                raise LeadNotFoundError(lead_id)
            current = _record(row)
            if status != current.status:
                ensure_transition(current.status, status)
            seen = current.row_version if expected_version is None else expected_version
            if current.row_version != seen:
                raise VersionConflictError(lead_id, seen, current.row_version)

            values: dict[str, Any] = {
                "status": status,
                "last_updated": datetime.utcnow(),
                "row_version": seen + 1,
            }
            for col, value in (updates or {}).items():
                if col in JSON_COLUMNS:
                    values[col] = dumps_object(value)
                elif col in _PLAIN_COLUMNS:
                    values[col] = value

            stmt = (
                update(LeadRow)
                .where(LeadRow.lead_id == lead_id, LeadRow.row_version == seen)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            res = await session.execute(stmt)
            if res.rowcount == 0:
                await session.rollback()
                raise VersionConflictError(lead_id, seen, None)
            await session.commit()

            session.expire_all()
            fresh = await session.get(LeadRow, lead_id)
            log.info("lead %s: %s -> %s", lead_id, current.status.value, status.value)
            return _record(fresh)

    async def record_error(self, lead_id: str, message: str) -> None:
        """Best effort: a failure here is logged and swallowed."""
        try:
            async with self.session_maker() as session:
                row = await session.get(LeadRow, lead_id)
                if row is None:
                    raise LeadNotFoundError(lead_id)
                if row.status == LeadStatus.ERROR or can_transition(row.status, LeadStatus.ERROR):
                    row.status = LeadStatus.ERROR
                row.error_details = message[:1000]
                row.retry_count = (row.retry_count or 0) + 1
                row.row_version = (row.row_version or 1) + 1
                row.last_updated = datetime.utcnow()
                await session.commit()
            log.error("lead %s marked ERROR: %s", lead_id, message)
        except Exception:
            log.exception("failed to record error for lead %s", lead_id)
