"""On-demand AI suggestions for a prospect: message, schedule, tools."""

from typing import Optional

import structlog

from followup_flow.schemas.follow_up import FollowUp, FollowUpCreate
from followup_flow.schemas.prospect import Interaction, Prospect
from followup_flow.schemas.suggestions import (
    MessageSuggestion, MessageSuggestionInput,
    ScheduleSuggestion, ScheduleSuggestionInput,
    SuggestedFollowUp,
    ToolSuggestionInput, ToolSuggestions,
)
from followup_flow.services.prospects import ProspectService

logger = structlog.get_logger()

DEFAULT_USER_PREFERENCES = "Prefer morning follow-ups, avoid Mondays."


def describe_interactions(interactions: list[Interaction]) -> str:
    """One line per interaction with timestamp, summary and outcome."""
    return "\n".join(
        f"{i.date.strftime('%b %d, %Y %I:%M %p')}: {i.summary} ({i.outcome or 'no outcome'})"
        for i in interactions
    )


def summarize_interactions(interactions: list[Interaction]) -> str:
    return "; ".join(i.summary for i in interactions)


def describe_prospect(prospect: Prospect) -> str:
    return f"{prospect.name}, {prospect.email}" if prospect.email else prospect.name


class SuggestionService:
    """Builds generator inputs from stored prospects. Failures propagate as GenerationFailure."""

    def __init__(self, prospects: ProspectService, generator):
        self.prospects = prospects
        self.generator = generator

    async def suggest_message(self, prospect_id: str, objections: Optional[str] = None) -> MessageSuggestion:
        prospect = await self.prospects.get_prospect(prospect_id)
        follow_ups = await self.prospects.list_follow_ups_for_prospect(prospect_id)
        completed = sum(1 for fu in follow_ups if fu.status == "Completed")

        return await self.generator.suggest_message(MessageSuggestionInput(
            prospect_data=prospect.initial_data,
            previous_interactions=describe_interactions(prospect.interaction_history),
            follow_up_number=completed + 1,
            funnel_stage=prospect.current_funnel_stage,
            prospect_objections=objections or None,
        ))

    async def suggest_schedule(self, prospect_id: str, user_preferences: Optional[str] = None) -> ScheduleSuggestion:
        prospect = await self.prospects.get_prospect(prospect_id)
        return await self.generator.schedule_follow_up(ScheduleSuggestionInput(
            prospect_data=describe_prospect(prospect),
            interaction_history=summarize_interactions(prospect.interaction_history),
            current_funnel_stage=prospect.current_funnel_stage,
            user_preferences=user_preferences or DEFAULT_USER_PREFERENCES,
            current_date=self.prospects.clock().date(),
        ))

    async def suggest_tools(self, prospect_id: str) -> ToolSuggestions:
        prospect = await self.prospects.get_prospect(prospect_id)
        return await self.generator.suggest_tools(ToolSuggestionInput(
            prospect_name=prospect.name,
            funnel_stage=prospect.current_funnel_stage,
            prospect_info=prospect.initial_data,
            previous_interactions=summarize_interactions(prospect.interaction_history),
        ))

    async def apply_schedule(self, prospect_id: str, slots: list[SuggestedFollowUp]) -> list[FollowUp]:
        """Schedule each suggested slot as a Pending follow-up."""
        await self.prospects.get_prospect(prospect_id)
        created = []
        for slot in slots:
            created.append(await self.prospects.add_follow_up(FollowUpCreate(
                prospect_id=prospect_id,
                date=slot.date,
                time=slot.time,
                method=slot.method,
                notes=slot.notes,
            )))
        logger.info("ai_schedule_applied", prospect_id=prospect_id, follow_ups_created=len(created))
        return created
