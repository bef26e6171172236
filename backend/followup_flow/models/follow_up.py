"""Scheduled follow-up model."""

from datetime import date as date_type, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from followup_flow.database import Base
from followup_flow.schemas.common import utcnow


class FollowUp(Base):
    __tablename__ = "follow_ups"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)  # user id from auth
    prospect_id: Mapped[str] = mapped_column(String(64), ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False, index=True)

    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    method: Mapped[str] = mapped_column(String(20), nullable=False)  # Email, Call, In-Person
    notes: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), default="Pending", index=True)  # Pending, Completed, Missed

    # Copied from AI suggestions at create/edit time
    ai_suggested_tone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ai_suggested_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    ai_suggested_tool: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
