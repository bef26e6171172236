"""Accountability summary - trailing-window activity rollup."""

from datetime import datetime, timedelta
from typing import Iterable, Optional
from urllib.parse import quote

from followup_flow.schemas.common import utcnow
from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.gamification import AccountabilitySummary
from followup_flow.schemas.prospect import Prospect


def build_share_text(window_days: int, new_prospects: int, follow_ups_done: int,
                     interactions_logged: int, streak: int) -> str:
    period = "2 weeks" if window_days == 14 else f"{window_days} days"
    return (
        f"Here's my Follow-Up Flow activity for the last {period}:\n"
        f"- New Prospects: {new_prospects}\n"
        f"- Follow-ups Done: {follow_ups_done}\n"
        f"- Notes Logged: {interactions_logged}\n"
        f"- Current Streak: {streak} follow-ups in a row\n"
        f"\n"
        f"Any tips for improvement?"
    )


def summarize_activity(
    prospects: Iterable[Prospect],
    follow_ups: Iterable[FollowUp],
    current_streak: int,
    window_days: int = 14,
    now: Optional[datetime] = None,
) -> AccountabilitySummary:
    """Count activity inside [now - window_days, now]. Read-only."""
    now = now or utcnow()
    start = now - timedelta(days=window_days)

    def in_window(ts: datetime) -> bool:
        return start <= ts <= now

    prospects = list(prospects)
    new_prospects = sum(1 for p in prospects if in_window(p.created_at))
    interactions_logged = sum(
        1 for p in prospects for i in p.interaction_history if in_window(i.date)
    )
    # updated_at stands in for the moment the follow-up left Pending
    follow_ups_done = sum(
        1 for fu in follow_ups if fu.status != "Pending" and in_window(fu.updated_at)
    )

    share_text = build_share_text(window_days, new_prospects, follow_ups_done, interactions_logged, current_streak)
    return AccountabilitySummary(
        window_days=window_days,
        window_start=start,
        window_end=now,
        new_prospects=new_prospects,
        follow_ups_done=follow_ups_done,
        interactions_logged=interactions_logged,
        current_follow_up_streak=current_streak,
        share_text=share_text,
        sms_link=f"sms:?body={quote(share_text)}",
    )
