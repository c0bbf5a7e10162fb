from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .domain.types import LeadStatus


class Base(DeclarativeBase):
    pass


# -----------------------------
# Models
# -----------------------------
class LeadRow(Base):
    """Same columns as the tracking sheet, plus the row_version concurrency token."""

    __tablename__ = "leads"

    lead_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    status: Mapped[LeadStatus] = mapped_column(Enum(LeadStatus), index=True)
    business_legal_name: Mapped[str] = mapped_column(String(300), default="")

    phase1_folder_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    phase2_folder_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    phase1_submission_data_json: Mapped[str] = mapped_column(Text, default="{}")
    phase2_submission_data_json: Mapped[str] = mapped_column(Text, default="{}")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    error_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    retry_count: Mapped[int] = mapped_column(Integer, default=0)
    row_version: Mapped[int] = mapped_column(Integer, default=1)
