"""Shared fakes for service and API tests."""

from datetime import date, datetime, timedelta

from followup_flow.errors import GenerationFailure
from followup_flow.repositories.memory import InMemoryFollowUpRepository, InMemoryProspectRepository
from followup_flow.schemas.prospect import ProspectCreate
from followup_flow.schemas.suggestions import (
    ColorCodeResult, MessageSuggestion, ScheduleSuggestion, SuggestedFollowUp,
    ToolSuggestion, ToolSuggestions,
)
from followup_flow.services.gamification import GamificationTracker, InMemoryGamificationStore
from followup_flow.services.prospects import ProspectService


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)

    def set_date(self, day: date) -> None:
        self.now = datetime.combine(day, self.now.time())


STAGE_COLORS = {1: "#FF0000", 12: "#00FF00"}


class FakeGenerator:
    """Records calls and returns canned results; set `fail` to simulate an outage."""

    is_configured = True

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.color_calls = []
        self.message_calls = []
        self.schedule_calls = []
        self.tools_calls = []
        self.schedule_result = ScheduleSuggestion(
            follow_up_schedule=[
                SuggestedFollowUp(date=date(2024, 1, 12), time="09:30", method="Call", notes="Check in"),
                SuggestedFollowUp(date=date(2024, 1, 19), time="10:00", method="Email", notes="Send recap"),
            ],
            reasoning="Space touches a week apart.",
        )

    def _maybe_fail(self, task_type: str):
        if self.fail:
            raise GenerationFailure("generator offline", task_type=task_type)

    async def color_code(self, request):
        self.color_calls.append(request)
        self._maybe_fail("color_code")
        return ColorCodeResult(
            color_code=STAGE_COLORS.get(request.stage, "#888800"),
            reasoning=f"Stage {request.stage} color",
        )

    async def suggest_message(self, request):
        self.message_calls.append(request)
        self._maybe_fail("suggest_message")
        return MessageSuggestion(tone="friendly", content="Hi there, just checking in.", suggested_tool="3-way call")

    async def schedule_follow_up(self, request):
        self.schedule_calls.append(request)
        self._maybe_fail("schedule_follow_up")
        return self.schedule_result

    async def suggest_tools(self, request):
        self.tools_calls.append(request)
        self._maybe_fail("suggest_tools")
        return ToolSuggestions(tool_suggestions=[
            ToolSuggestion(tool_name="Prospect app", tool_type="Prospect by LegalShield", reasoning="Self-serve info"),
            ToolSuggestion(tool_name="Upline call", tool_type="3-way call", reasoning="Third-party credibility"),
            ToolSuggestion(tool_name="Home event", tool_type="Live Presentation", reasoning="Social proof"),
        ])


def make_service(clock: FixedClock, generator=None, user_id: str = "user-1") -> ProspectService:
    tracker = GamificationTracker(InMemoryGamificationStore(), user_id, clock=clock)
    return ProspectService(
        InMemoryProspectRepository(),
        InMemoryFollowUpRepository(),
        generator or FakeGenerator(),
        tracker,
        clock=clock,
    )


def prospect_data(name: str = "Alice Wonderland", stage: int = 1, **overrides) -> ProspectCreate:
    fields = {
        "name": name,
        "email": "alice@example.com",
        "initial_data": "Met at a networking event, interested in legal plans.",
        "current_funnel_stage": "Prospect",
        "follow_up_stage_number": stage,
    }
    fields.update(overrides)
    return ProspectCreate(**fields)
