"""Follow-up schemas."""

from datetime import date as date_type, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

FollowUpMethod = Literal["Email", "Call", "In-Person"]
FollowUpStatus = Literal["Pending", "Completed", "Missed"]

TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"


class FollowUpDraft(BaseModel):
    """Schedulable follow-up fields, without the owning prospect."""
    date: date_type
    time: str = Field(..., pattern=TIME_PATTERN)
    method: FollowUpMethod
    notes: str = ""
    ai_suggested_tone: Optional[str] = None
    ai_suggested_content: Optional[str] = None
    ai_suggested_tool: Optional[str] = None


class FollowUpCreate(FollowUpDraft):
    prospect_id: str = Field(..., min_length=1)


class FollowUpUpdate(BaseModel):
    date: Optional[date_type] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    method: Optional[FollowUpMethod] = None
    notes: Optional[str] = None
    status: Optional[FollowUpStatus] = None
    ai_suggested_tone: Optional[str] = None
    ai_suggested_content: Optional[str] = None
    ai_suggested_tool: Optional[str] = None


class FollowUp(FollowUpCreate):
    id: str
    owner_id: str
    status: FollowUpStatus = "Pending"
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
