"""
Calendar API endpoints.

Role-filtered calendar views and ad-hoc event management.
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from deliveryops.api.deps import CalendarQuery, CurrentRequester, ProjectCalendar, require_org
from deliveryops.core.exceptions import NotFoundError, ValidationError
from deliveryops.models.calendar_event import (
    CalendarEvent,
    CalendarEventCreate,
    CalendarEventUpdate,
    CalendarEventView,
)

router = APIRouter()


@router.get("/projects/{project_id}/calendar", response_model=list[CalendarEventView])
async def get_project_calendar(
    project_id: UUID,
    requester: CurrentRequester,
    service: CalendarQuery,
    start: datetime = Query(..., description="Window start (inclusive)"),
    end: datetime = Query(..., description="Window end (inclusive)"),
) -> list[CalendarEventView]:
    """Get the events of one project visible to the requester."""
    try:
        return await service.get_filtered_events(
            project_id, start, end, requester.role, requester.vendor_id
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/calendar", response_model=list[CalendarEventView])
async def get_org_calendar(
    requester: CurrentRequester,
    service: CalendarQuery,
    start: datetime = Query(...),
    end: datetime = Query(...),
) -> list[CalendarEventView]:
    """Get the events of every project of the requester's organization."""
    org_id = require_org(requester)
    try:
        return await service.get_org_events(
            org_id, start, end, requester.role, requester.vendor_id
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post(
    "/projects/{project_id}/calendar/events",
    response_model=CalendarEvent,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    project_id: UUID,
    event: CalendarEventCreate,
    requester: CurrentRequester,
    service: ProjectCalendar,
) -> CalendarEvent:
    """Create an ad-hoc calendar event."""
    org_id = require_org(requester)
    try:
        return await service.create_event(org_id, project_id, event)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.patch("/calendar/events/{event_id}", response_model=CalendarEvent)
async def update_event(
    event_id: UUID,
    update: CalendarEventUpdate,
    requester: CurrentRequester,
    service: ProjectCalendar,
) -> CalendarEvent:
    """Update a calendar event."""
    try:
        return await service.update_event(event_id, update)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete("/calendar/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    requester: CurrentRequester,
    service: ProjectCalendar,
):
    """Delete a calendar event."""
    deleted = await service.delete_event(event_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Calendar event {event_id} not found",
        )
