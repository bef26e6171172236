"""Prospect endpoints: CRUD, interactions, funnel progress."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from followup_flow.api.deps import get_prospect_service
from followup_flow.api.health import PROSPECTS_CREATED
from followup_flow.errors import NotFoundError
from followup_flow.schemas.follow_up import FollowUp, FollowUpCreate, FollowUpDraft
from followup_flow.schemas.prospect import (
    FunnelProgress, Interaction, InteractionCreate, Prospect, ProspectCreate, ProspectUpdate,
)
from followup_flow.services.funnel import funnel_progress
from followup_flow.services.prospects import ProspectService

router = APIRouter(prefix="/prospects", tags=["prospects"])


class ProspectCreateRequest(ProspectCreate):
    """New prospect, optionally with its first follow-up."""
    first_follow_up: Optional[FollowUpDraft] = None


@router.get("", response_model=list[Prospect])
async def list_prospects(service: ProspectService = Depends(get_prospect_service)):
    """List all prospects."""
    return await service.list_prospects()


@router.post("", response_model=Prospect, status_code=201)
async def create_prospect(
    data: ProspectCreateRequest,
    service: ProspectService = Depends(get_prospect_service),
):
    """Create a prospect; a first follow-up is scheduled when provided."""
    prospect = await service.create_prospect(ProspectCreate(**data.model_dump(exclude={"first_follow_up"})))
    PROSPECTS_CREATED.inc()

    if data.first_follow_up:
        await service.add_follow_up(FollowUpCreate(prospect_id=prospect.id, **data.first_follow_up.model_dump()))
        prospect = await service.get_prospect(prospect.id)
    return prospect


@router.get("/{prospect_id}", response_model=Prospect)
async def get_prospect(prospect_id: str, service: ProspectService = Depends(get_prospect_service)):
    """Get a single prospect."""
    try:
        return await service.get_prospect(prospect_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")


@router.patch("/{prospect_id}", response_model=Prospect)
async def update_prospect(
    prospect_id: str,
    data: ProspectUpdate,
    service: ProspectService = Depends(get_prospect_service),
):
    """Update a prospect. Changing the stage number regenerates its color code."""
    try:
        return await service.update_prospect(prospect_id, data)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{prospect_id}", status_code=204)
async def delete_prospect(prospect_id: str, service: ProspectService = Depends(get_prospect_service)):
    """Delete a prospect together with its follow-ups."""
    try:
        await service.delete_prospect(prospect_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")


@router.post("/{prospect_id}/interactions", response_model=Interaction, status_code=201)
async def add_interaction(
    prospect_id: str,
    data: InteractionCreate,
    service: ProspectService = Depends(get_prospect_service),
):
    """Log an interaction with a prospect."""
    try:
        return await service.add_interaction(prospect_id, data)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")


@router.get("/{prospect_id}/follow-ups", response_model=list[FollowUp])
async def list_prospect_follow_ups(prospect_id: str, service: ProspectService = Depends(get_prospect_service)):
    """All follow-ups for a prospect, by date."""
    return await service.list_follow_ups_for_prospect(prospect_id)


@router.get("/{prospect_id}/funnel", response_model=FunnelProgress)
async def get_funnel_progress(prospect_id: str, service: ProspectService = Depends(get_prospect_service)):
    try:
        prospect = await service.get_prospect(prospect_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Prospect not found")
    return funnel_progress(prospect.current_funnel_stage)
