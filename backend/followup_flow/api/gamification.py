"""Gamification stats and accountability summary endpoints."""

from fastapi import APIRouter, Depends, Query

from followup_flow.api.deps import get_prospect_service
from followup_flow.config import settings
from followup_flow.schemas.gamification import AccountabilitySummary, GamificationProgress, GamificationStats
from followup_flow.services.prospects import ProspectService

router = APIRouter(tags=["gamification"])


@router.get("/gamification/stats", response_model=GamificationStats)
async def get_gamification_stats(service: ProspectService = Depends(get_prospect_service)):
    """Current user's counters; the daily count reflects today only."""
    return service.get_gamification_stats()


@router.get("/gamification/progress", response_model=GamificationProgress)
async def get_gamification_progress(service: ProspectService = Depends(get_prospect_service)):
    """Daily goal and streak milestone progress with unlocked achievements."""
    return service.tracker.get_progress()


@router.get("/accountability", response_model=AccountabilitySummary)
async def get_accountability_summary(
    days: int = Query(settings.accountability_window_days, ge=1, le=365),
    service: ProspectService = Depends(get_prospect_service),
):
    """Activity rollup for the trailing window, with shareable text."""
    return await service.get_accountability_summary(days)
