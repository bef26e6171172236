"""Prospect and interaction models."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from followup_flow.database import Base
from followup_flow.schemas.common import utcnow


class Prospect(Base):
    __tablename__ = "prospects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)  # user id from auth

    # Contact info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    initial_data: Mapped[str] = mapped_column(Text, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Funnel
    current_funnel_stage: Mapped[str] = mapped_column(String(50), nullable=False)  # Prospect .. Close
    follow_up_stage_number: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-12

    # Derived
    color_code: Mapped[str | None] = mapped_column(String(7), nullable=True)
    color_code_reasoning: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    last_contacted_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    interaction_history: Mapped[list["Interaction"]] = relationship(
        back_populates="prospect",
        order_by="Interaction.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Interaction(Base):
    __tablename__ = "interactions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    prospect_id: Mapped[str] = mapped_column(String(64), ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)  # insertion order within the prospect

    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)  # Email, Call, Meeting, Note, Text Message
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True)

    prospect: Mapped[Prospect] = relationship(back_populates="interaction_history")
