"""Follow-up endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from followup_flow.api.deps import get_prospect_service
from followup_flow.api.health import FOLLOW_UPS_CLOSED
from followup_flow.config import settings
from followup_flow.errors import NotFoundError, StatusTransitionError
from followup_flow.schemas.follow_up import FollowUp, FollowUpCreate, FollowUpUpdate
from followup_flow.services.prospects import ProspectService

router = APIRouter(prefix="/follow-ups", tags=["follow-ups"])


@router.get("/upcoming", response_model=list[FollowUp])
async def list_upcoming_follow_ups(
    days: int = Query(settings.upcoming_window_days, ge=0, le=366),
    service: ProspectService = Depends(get_prospect_service),
):
    """Pending follow-ups due within the next `days` days."""
    return await service.list_upcoming_follow_ups(days)


@router.post("", response_model=FollowUp, status_code=201)
async def create_follow_up(
    data: FollowUpCreate,
    service: ProspectService = Depends(get_prospect_service),
):
    """Schedule a follow-up for an existing prospect."""
    try:
        return await service.add_follow_up(data)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")


@router.patch("/{follow_up_id}", response_model=FollowUp)
async def update_follow_up(
    follow_up_id: str,
    data: FollowUpUpdate,
    service: ProspectService = Depends(get_prospect_service),
):
    """Edit a follow-up or mark it Completed/Missed."""
    try:
        follow_up = await service.update_follow_up(follow_up_id, data)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Follow-up not found")
    except StatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if data.status and data.status != "Pending":
        FOLLOW_UPS_CLOSED.labels(status=data.status).inc()
    return follow_up


@router.delete("/{follow_up_id}", status_code=204)
async def delete_follow_up(follow_up_id: str, service: ProspectService = Depends(get_prospect_service)):
    """Delete a follow-up."""
    try:
        await service.delete_follow_up(follow_up_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Follow-up not found")
