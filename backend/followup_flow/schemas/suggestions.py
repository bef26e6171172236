"""Input/output contracts for the text-generation flows."""

from datetime import date as date_type
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from followup_flow.schemas.follow_up import FollowUpMethod, TIME_PATTERN

ToolType = Literal["Prospect by LegalShield", "3-way call", "Live Presentation"]
MessageTone = Literal["friendly", "professional", "urgent"]


class ColorCodeInput(BaseModel):
    stage: int = Field(..., ge=1, le=12)  # 1 = fresh, 12 = ripe
    prospect_name: str


class ColorCodeResult(BaseModel):
    color_code: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    reasoning: str

    @field_validator("color_code")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class MessageSuggestionInput(BaseModel):
    prospect_data: str
    previous_interactions: str
    follow_up_number: int = Field(..., ge=1)
    funnel_stage: str
    prospect_objections: Optional[str] = None


class MessageSuggestion(BaseModel):
    tone: MessageTone
    content: str
    suggested_tool: str

    @field_validator("tone", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class ScheduleSuggestionInput(BaseModel):
    prospect_data: str
    interaction_history: str
    current_funnel_stage: str
    user_preferences: str
    current_date: date_type


class SuggestedFollowUp(BaseModel):
    date: date_type
    time: str = Field(..., pattern=TIME_PATTERN)
    method: FollowUpMethod
    notes: str


class ScheduleSuggestion(BaseModel):
    follow_up_schedule: list[SuggestedFollowUp]
    reasoning: str


class ToolSuggestionInput(BaseModel):
    prospect_name: str
    funnel_stage: str
    prospect_info: str
    previous_interactions: str


class ToolSuggestion(BaseModel):
    tool_name: str
    tool_type: ToolType
    reasoning: str
    details: Optional[str] = None


class ToolSuggestions(BaseModel):
    tool_suggestions: list[ToolSuggestion] = Field(..., min_length=3, max_length=3)


# API request bodies

class MessageSuggestionRequest(BaseModel):
    prospect_objections: Optional[str] = None


class ScheduleSuggestionRequest(BaseModel):
    user_preferences: Optional[str] = None


class ApplyScheduleRequest(BaseModel):
    follow_up_schedule: list[SuggestedFollowUp] = Field(..., min_length=1)
