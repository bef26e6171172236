"""Gamification and accountability schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class GamificationStats(BaseModel):
    daily_prospects_added: int = 0
    last_prospect_added_date: Optional[date] = None
    follow_up_streak: int = 0
    total_on_time_follow_ups: int = 0
    total_missed_follow_ups: int = 0


class Achievement(BaseModel):
    title: str
    achieved: bool


class GamificationProgress(BaseModel):
    stats: GamificationStats
    daily_prospect_goal: int
    daily_goal_progress: float  # percent, capped at 100
    next_streak_milestone: int
    streak_progress: float  # percent, capped at 100
    success_rate: Optional[float] = None  # on-time share of scored follow-ups, percent
    achievements: list[Achievement]


class AccountabilitySummary(BaseModel):
    window_days: int
    window_start: datetime
    window_end: datetime
    new_prospects: int
    follow_ups_done: int
    interactions_logged: int
    current_follow_up_streak: int
    share_text: str
    sms_link: str
