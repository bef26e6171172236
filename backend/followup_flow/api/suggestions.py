"""AI suggestion endpoints for a prospect."""

from fastapi import APIRouter, Depends, HTTPException

from followup_flow.api.deps import get_suggestion_service
from followup_flow.api.health import ERRORS, SUGGESTION_REQUESTS
from followup_flow.errors import GenerationFailure, NotFoundError
from followup_flow.schemas.follow_up import FollowUp
from followup_flow.schemas.suggestions import (
    ApplyScheduleRequest,
    MessageSuggestion, MessageSuggestionRequest,
    ScheduleSuggestion, ScheduleSuggestionRequest,
    ToolSuggestions,
)
from followup_flow.services.suggestions import SuggestionService

import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/prospects/{prospect_id}/suggestions", tags=["suggestions"])


def _generation_error(flow: str, prospect_id: str, e: GenerationFailure) -> HTTPException:
    ERRORS.labels(type="generation_failure").inc()
    logger.warning("suggestion_failed", flow=flow, prospect_id=prospect_id, error=e.reason)
    return HTTPException(status_code=502, detail=f"AI suggestion unavailable: {e.reason}")


@router.post("/message", response_model=MessageSuggestion)
async def suggest_message(
    prospect_id: str,
    data: MessageSuggestionRequest,
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    """Suggest tone, content and a tool for the next follow-up message."""
    SUGGESTION_REQUESTS.labels(flow="message").inc()
    try:
        return await suggestions.suggest_message(prospect_id, data.prospect_objections)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")
    except GenerationFailure as e:
        raise _generation_error("message", prospect_id, e)


@router.post("/schedule", response_model=ScheduleSuggestion)
async def suggest_schedule(
    prospect_id: str,
    data: ScheduleSuggestionRequest,
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    """Suggest a sequence of future follow-ups."""
    SUGGESTION_REQUESTS.labels(flow="schedule").inc()
    try:
        return await suggestions.suggest_schedule(prospect_id, data.user_preferences)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")
    except GenerationFailure as e:
        raise _generation_error("schedule", prospect_id, e)


@router.post("/schedule/apply", response_model=list[FollowUp], status_code=201)
async def apply_schedule(
    prospect_id: str,
    data: ApplyScheduleRequest,
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    """Create Pending follow-ups from an accepted schedule suggestion."""
    try:
        return await suggestions.apply_schedule(prospect_id, data.follow_up_schedule)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")


@router.post("/tools", response_model=ToolSuggestions)
async def suggest_tools(
    prospect_id: str,
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    """Suggest three third-party tools for the prospect's stage."""
    SUGGESTION_REQUESTS.labels(flow="tools").inc()
    try:
        return await suggestions.suggest_tools(prospect_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")
    except GenerationFailure as e:
        raise _generation_error("tools", prospect_id, e)
