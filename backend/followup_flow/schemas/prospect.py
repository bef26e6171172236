"""Prospect and interaction schemas."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from followup_flow.schemas.common import to_naive_utc

FunnelStage = Literal["Prospect", "Viewed Media/Presentation", "Spoke with Third-Party", "Close"]
FUNNEL_STAGES: list[str] = ["Prospect", "Viewed Media/Presentation", "Spoke with Third-Party", "Close"]

InteractionType = Literal["Email", "Call", "Meeting", "Note", "Text Message"]


class InteractionCreate(BaseModel):
    date: datetime
    type: InteractionType
    summary: str = Field(..., min_length=1, max_length=500)
    outcome: Optional[str] = None

    @field_validator("date")
    @classmethod
    def _naive_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class Interaction(InteractionCreate):
    id: str

    model_config = {"from_attributes": True}


class ProspectCreate(BaseModel):
    """Input for a new prospect."""
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None  # EmailStr is too strict for hand-entered contacts
    phone: Optional[str] = None
    initial_data: str = Field(..., min_length=1)
    current_funnel_stage: FunnelStage
    follow_up_stage_number: int = Field(..., ge=1, le=12)
    avatar_url: Optional[str] = None


class ProspectUpdate(BaseModel):
    """Partial update; only fields explicitly sent are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    initial_data: Optional[str] = Field(None, min_length=1)
    current_funnel_stage: Optional[FunnelStage] = None
    follow_up_stage_number: Optional[int] = Field(None, ge=1, le=12)
    avatar_url: Optional[str] = None


class Prospect(BaseModel):
    id: str
    owner_id: str
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    initial_data: str = Field(..., min_length=1)
    current_funnel_stage: FunnelStage
    follow_up_stage_number: int = Field(..., ge=1, le=12)

    # Derived
    color_code: Optional[str] = None
    color_code_reasoning: Optional[str] = None
    next_follow_up_date: Optional[date] = None

    last_contacted_date: Optional[datetime] = None
    interaction_history: list[Interaction] = Field(default_factory=list)
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FunnelProgress(BaseModel):
    current_stage: FunnelStage
    stage_index: int
    completed_stages: list[str]
    remaining_stages: list[str]
    percent_complete: float
