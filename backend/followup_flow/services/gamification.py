"""Gamification tracking - daily prospect goal, follow-up streaks, on-time/missed totals."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Callable, Optional

import redis as redis_lib
import structlog

from followup_flow.config import settings
from followup_flow.schemas.common import utcnow
from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.gamification import Achievement, GamificationProgress, GamificationStats

logger = structlog.get_logger()

_redis: redis_lib.Redis | None = None


def get_redis() -> redis_lib.Redis:
    global _redis
    if _redis is None:
        _redis = redis_lib.from_url(settings.redis_url, decode_responses=True)
    return _redis


class GamificationStore(ABC):
    """Persistence for per-user stats, independent of the entity store."""

    @abstractmethod
    def load(self, user_id: str) -> GamificationStats:
        ...

    @abstractmethod
    def save(self, user_id: str, stats: GamificationStats) -> None:
        ...


class InMemoryGamificationStore(GamificationStore):
    def __init__(self):
        self._stats: dict[str, GamificationStats] = {}

    def load(self, user_id: str) -> GamificationStats:
        stats = self._stats.get(user_id)
        return stats.model_copy() if stats else GamificationStats()

    def save(self, user_id: str, stats: GamificationStats) -> None:
        self._stats[user_id] = stats.model_copy()


class RedisGamificationStore(GamificationStore):
    """Stores stats as one Redis hash per user."""

    def __init__(self, r: redis_lib.Redis | None = None):
        self.r = r if r is not None else get_redis()

    def _key(self, user_id: str) -> str:
        return f"gamification:{user_id}"

    def load(self, user_id: str) -> GamificationStats:
        data = self.r.hgetall(self._key(user_id))
        if not data:
            return GamificationStats()
        last_added = data.get("last_prospect_added_date") or None
        return GamificationStats(
            daily_prospects_added=int(data.get("daily_prospects_added", 0)),
            last_prospect_added_date=date.fromisoformat(last_added) if last_added else None,
            follow_up_streak=int(data.get("follow_up_streak", 0)),
            total_on_time_follow_ups=int(data.get("total_on_time_follow_ups", 0)),
            total_missed_follow_ups=int(data.get("total_missed_follow_ups", 0)),
        )

    def save(self, user_id: str, stats: GamificationStats) -> None:
        self.r.hset(self._key(user_id), mapping={
            "daily_prospects_added": stats.daily_prospects_added,
            "last_prospect_added_date": stats.last_prospect_added_date.isoformat() if stats.last_prospect_added_date else "",
            "follow_up_streak": stats.follow_up_streak,
            "total_on_time_follow_ups": stats.total_on_time_follow_ups,
            "total_missed_follow_ups": stats.total_missed_follow_ups,
        })


class GamificationTracker:
    """Updates a user's stats in reaction to prospect and follow-up events."""

    def __init__(self, store: GamificationStore, user_id: str, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.user_id = user_id
        self.clock = clock

    def _today(self) -> date:
        return self.clock().date()

    def get_stats(self) -> GamificationStats:
        """Current stats; the daily counter reads 0 once its day has passed."""
        stats = self.store.load(self.user_id)
        if stats.last_prospect_added_date != self._today():
            stats.daily_prospects_added = 0
        return stats

    def on_prospect_added(self) -> GamificationStats:
        stats = self.store.load(self.user_id)
        today = self._today()
        if stats.last_prospect_added_date != today:
            stats.daily_prospects_added = 1
            stats.last_prospect_added_date = today
        else:
            stats.daily_prospects_added += 1
        self.store.save(self.user_id, stats)
        return stats

    def on_follow_up_status_changed(self, before: FollowUp, after: FollowUp) -> GamificationStats:
        """Score a follow-up that left Pending.

        Completion on or before the scheduled calendar date extends the streak;
        a late completion or a miss resets it.
        """
        stats = self.store.load(self.user_id)
        if after.status == "Pending":
            return stats

        if after.status == "Completed" and self._today() <= before.date:
            stats.follow_up_streak += 1
            stats.total_on_time_follow_ups += 1
        else:
            stats.follow_up_streak = 0
            stats.total_missed_follow_ups += 1

        self.store.save(self.user_id, stats)
        logger.info(
            "follow_up_scored",
            user_id=self.user_id,
            follow_up_id=after.id,
            status=after.status,
            streak=stats.follow_up_streak,
        )
        return stats

    def get_progress(self, daily_goal: Optional[int] = None, milestones: Optional[list[int]] = None) -> GamificationProgress:
        daily_goal = daily_goal or settings.daily_prospect_goal
        milestones = sorted(milestones or settings.streak_milestones)
        stats = self.get_stats()

        next_milestone = next((m for m in milestones if m > stats.follow_up_streak), milestones[-1])
        scored = stats.total_on_time_follow_ups + stats.total_missed_follow_ups
        return GamificationProgress(
            stats=stats,
            daily_prospect_goal=daily_goal,
            daily_goal_progress=min(stats.daily_prospects_added / daily_goal * 100, 100.0),
            next_streak_milestone=next_milestone,
            streak_progress=min(stats.follow_up_streak / next_milestone * 100, 100.0),
            success_rate=round(stats.total_on_time_follow_ups / scored * 100, 1) if scored else None,
            achievements=_achievements(stats, daily_goal),
        )


def _achievements(stats: GamificationStats, daily_goal: int) -> list[Achievement]:
    any_activity = (
        stats.last_prospect_added_date is not None
        or stats.total_on_time_follow_ups > 0
        or stats.total_missed_follow_ups > 0
    )
    return [
        Achievement(title="First Prospect", achieved=any_activity),
        Achievement(title="5 Day Streak", achieved=stats.follow_up_streak >= 5),
        Achievement(title="Perfect Day", achieved=stats.daily_prospects_added >= daily_goal),
        Achievement(title="Consistent Closer", achieved=stats.follow_up_streak >= 25),
    ]
