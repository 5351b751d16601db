"""
Milestone API endpoints.

Chain generation, edits, completion and progress statistics.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from deliveryops.api.deps import (
    ChainGenerator,
    CompletionEngine,
    CurrentRequester,
    ProjectCalendar,
    require_org,
)
from deliveryops.core.exceptions import NotFoundError, ValidationError
from deliveryops.models.milestone import Milestone, MilestoneCompletionResult, MilestoneStats, MilestoneUpdate
from deliveryops.models.milestone_template import MilestoneConfig

router = APIRouter()


class GenerateMilestonesRequest(BaseModel):
    """Request body of chain generation."""

    start_date: datetime
    vendor_id: Optional[UUID] = None
    config: Optional[MilestoneConfig] = None


class CompleteMilestoneRequest(BaseModel):
    """Request body of milestone completion."""

    completion_date: Optional[datetime] = None


@router.post(
    "/projects/{project_id}/milestones/generate",
    response_model=list[Milestone],
    status_code=status.HTTP_201_CREATED,
)
async def generate_milestones(
    project_id: UUID,
    body: GenerateMilestonesRequest,
    requester: CurrentRequester,
    generator: ChainGenerator,
) -> list[Milestone]:
    """Generate the delivery milestone chain of a project."""
    org_id = require_org(requester)
    try:
        return await generator.generate(
            org_id=org_id,
            project_id=project_id,
            start_date=body.start_date,
            vendor_id=body.vendor_id,
            config=body.config,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/projects/{project_id}/milestones", response_model=list[Milestone])
async def list_milestones(
    project_id: UUID,
    requester: CurrentRequester,
    service: ProjectCalendar,
) -> list[Milestone]:
    """List a project's milestones by planned date."""
    return await service.list_project_milestones(project_id)


@router.get("/projects/{project_id}/milestones/stats", response_model=MilestoneStats)
async def get_milestone_stats(
    project_id: UUID,
    requester: CurrentRequester,
    service: ProjectCalendar,
) -> MilestoneStats:
    """Get milestone counts and completion percentage."""
    return await service.get_milestone_stats(project_id)


@router.patch("/milestones/{milestone_id}", response_model=Milestone)
async def update_milestone(
    milestone_id: UUID,
    update: MilestoneUpdate,
    requester: CurrentRequester,
    service: ProjectCalendar,
) -> Milestone:
    """Update a milestone's date, status or notes."""
    try:
        return await service.update_milestone(milestone_id, update)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/milestones/{milestone_id}/complete", response_model=MilestoneCompletionResult)
async def complete_milestone(
    milestone_id: UUID,
    requester: CurrentRequester,
    engine: CompletionEngine,
    body: Optional[CompleteMilestoneRequest] = None,
) -> MilestoneCompletionResult:
    """Complete a milestone and reschedule the milestones it triggers."""
    completion_date = body.completion_date if body else None
    try:
        return await engine.complete(milestone_id, completion_date)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
