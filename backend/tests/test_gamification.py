"""Tests for gamification tracking and its stores."""

from datetime import date, datetime
from unittest.mock import MagicMock

from helpers import FixedClock
from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.gamification import GamificationStats
from followup_flow.services.gamification import (
    GamificationTracker, InMemoryGamificationStore, RedisGamificationStore,
)


def make_follow_up(day: date, status: str = "Pending") -> FollowUp:
    now = datetime(2024, 1, 1, 8, 0)
    return FollowUp(
        id="fu-1", owner_id="user-1", prospect_id="p-1", date=day, time="10:00", method="Call",
        status=status, created_at=now, updated_at=now,
    )


class TestDailyProspectCounter:
    def setup_method(self):
        self.store = InMemoryGamificationStore()
        self.clock = FixedClock(datetime(2024, 1, 1, 12, 0))
        self.tracker = GamificationTracker(self.store, "user-1", clock=self.clock)

    def test_first_add_sets_one(self):
        stats = self.tracker.on_prospect_added()
        assert stats.daily_prospects_added == 1
        assert stats.last_prospect_added_date == date(2024, 1, 1)

    def test_same_day_increments(self):
        self.store.save("user-1", GamificationStats(daily_prospects_added=3, last_prospect_added_date=date(2024, 1, 1)))
        assert self.tracker.on_prospect_added().daily_prospects_added == 4

    def test_new_day_resets_to_one(self):
        self.store.save("user-1", GamificationStats(daily_prospects_added=3, last_prospect_added_date=date(2024, 1, 1)))
        self.clock.set_date(date(2024, 1, 2))
        stats = self.tracker.on_prospect_added()
        assert stats.daily_prospects_added == 1
        assert stats.last_prospect_added_date == date(2024, 1, 2)

    def test_stale_count_reads_zero(self):
        self.tracker.on_prospect_added()
        self.clock.set_date(date(2024, 1, 3))
        assert self.tracker.get_stats().daily_prospects_added == 0

    def test_users_are_isolated(self):
        self.tracker.on_prospect_added()
        other = GamificationTracker(self.store, "user-2", clock=self.clock)
        assert other.get_stats().daily_prospects_added == 0


class TestFollowUpScoring:
    def setup_method(self):
        self.store = InMemoryGamificationStore()
        self.clock = FixedClock(datetime(2024, 1, 9, 12, 0))
        self.tracker = GamificationTracker(self.store, "user-1", clock=self.clock)

    def close(self, status: str, scheduled: date = date(2024, 1, 10)) -> GamificationStats:
        before = make_follow_up(scheduled)
        after = before.model_copy(update={"status": status})
        return self.tracker.on_follow_up_status_changed(before, after)

    def test_completed_early_is_on_time(self):
        stats = self.close("Completed")
        assert stats.follow_up_streak == 1
        assert stats.total_on_time_follow_ups == 1

    def test_completed_on_scheduled_day_is_on_time(self):
        self.clock.set_date(date(2024, 1, 10))
        assert self.close("Completed").follow_up_streak == 1

    def test_completed_late_resets_streak(self):
        self.store.save("user-1", GamificationStats(follow_up_streak=4, total_on_time_follow_ups=4))
        self.clock.set_date(date(2024, 1, 15))
        stats = self.close("Completed")
        assert stats.follow_up_streak == 0
        assert stats.total_missed_follow_ups == 1
        assert stats.total_on_time_follow_ups == 4

    def test_missed_resets_streak(self):
        self.store.save("user-1", GamificationStats(follow_up_streak=2))
        stats = self.close("Missed")
        assert stats.follow_up_streak == 0
        assert stats.total_missed_follow_ups == 1

    def test_still_pending_is_ignored(self):
        stats = self.close("Pending")
        assert stats == GamificationStats()


class TestProgress:
    def setup_method(self):
        self.store = InMemoryGamificationStore()
        self.clock = FixedClock(datetime(2024, 1, 1, 12, 0))
        self.tracker = GamificationTracker(self.store, "user-1", clock=self.clock)

    def achieved(self, progress) -> set[str]:
        return {a.title for a in progress.achievements if a.achieved}

    def test_empty_progress(self):
        progress = self.tracker.get_progress(daily_goal=5, milestones=[5, 10])
        assert progress.daily_goal_progress == 0
        assert progress.next_streak_milestone == 5
        assert self.achieved(progress) == set()

    def test_goal_and_milestone_progress(self):
        self.store.save("user-1", GamificationStats(
            daily_prospects_added=5, last_prospect_added_date=date(2024, 1, 1), follow_up_streak=7,
        ))
        progress = self.tracker.get_progress(daily_goal=5, milestones=[5, 10, 25])
        assert progress.daily_goal_progress == 100.0
        assert progress.next_streak_milestone == 10
        assert progress.streak_progress == 70.0
        assert self.achieved(progress) == {"First Prospect", "5 Day Streak", "Perfect Day"}

    def test_progress_capped_past_last_milestone(self):
        self.store.save("user-1", GamificationStats(follow_up_streak=30, total_on_time_follow_ups=30))
        progress = self.tracker.get_progress(daily_goal=5, milestones=[5, 10, 25])
        assert progress.next_streak_milestone == 25
        assert progress.streak_progress == 100.0
        assert "Consistent Closer" in self.achieved(progress)

    def test_success_rate_without_history(self):
        assert self.tracker.get_progress().success_rate is None

    def test_success_rate_from_scored_follow_ups(self):
        self.store.save("user-1", GamificationStats(total_on_time_follow_ups=3, total_missed_follow_ups=1))
        assert self.tracker.get_progress().success_rate == 75.0

    def test_success_rate_rounded(self):
        self.store.save("user-1", GamificationStats(total_on_time_follow_ups=2, total_missed_follow_ups=1))
        assert self.tracker.get_progress().success_rate == 66.7


class TestRedisGamificationStore:
    """Redis-backed store with a mocked client."""

    def setup_method(self):
        self.mock_redis = MagicMock()
        self.store = RedisGamificationStore(r=self.mock_redis)

    def test_load_missing_returns_defaults(self):
        self.mock_redis.hgetall.return_value = {}
        assert self.store.load("user-1") == GamificationStats()
        self.mock_redis.hgetall.assert_called_once_with("gamification:user-1")

    def test_load_parses_hash(self):
        self.mock_redis.hgetall.return_value = {
            "daily_prospects_added": "3",
            "last_prospect_added_date": "2024-01-01",
            "follow_up_streak": "2",
            "total_on_time_follow_ups": "6",
            "total_missed_follow_ups": "1",
        }
        stats = self.store.load("user-1")
        assert stats.daily_prospects_added == 3
        assert stats.last_prospect_added_date == date(2024, 1, 1)
        assert stats.follow_up_streak == 2
        assert stats.total_on_time_follow_ups == 6
        assert stats.total_missed_follow_ups == 1

    def test_load_empty_date(self):
        self.mock_redis.hgetall.return_value = {"daily_prospects_added": "0", "last_prospect_added_date": ""}
        assert self.store.load("user-1").last_prospect_added_date is None

    def test_save_writes_hash(self):
        self.store.save("user-1", GamificationStats(daily_prospects_added=2, last_prospect_added_date=date(2024, 1, 5)))
        self.mock_redis.hset.assert_called_once()
        args, kwargs = self.mock_redis.hset.call_args
        assert args == ("gamification:user-1",)
        assert kwargs["mapping"]["daily_prospects_added"] == 2
        assert kwargs["mapping"]["last_prospect_added_date"] == "2024-01-05"

    def test_save_without_date_writes_empty_string(self):
        self.store.save("user-1", GamificationStats())
        _, kwargs = self.mock_redis.hset.call_args
        assert kwargs["mapping"]["last_prospect_added_date"] == ""
