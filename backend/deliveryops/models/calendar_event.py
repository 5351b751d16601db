"""
Project calendar event model definitions.

Events mirror milestones one-to-one; ad-hoc events carry no milestone.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from deliveryops.models.enums import EventColor, EventType, VisibilityRole


class CalendarEventBase(BaseModel):
    """Base calendar event fields."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    start: datetime
    end: datetime
    all_day: bool = True
    event_type: EventType = EventType.OTHER
    color: EventColor = EventColor.BLUE
    visible_to_roles: list[VisibilityRole] = Field(
        default_factory=lambda: [VisibilityRole.ADMIN],
        description="Visibility tags allowed to see the event",
    )
    assigned_vendor_id: Optional[UUID] = None
    assigned_user_id: Optional[str] = None

    @model_validator(mode="after")
    def _end_not_before_start(self):
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class CalendarEventCreate(CalendarEventBase):
    """Schema for creating a calendar event."""

    milestone_id: Optional[UUID] = None
    created_by_id: Optional[str] = None


class CalendarEventUpdate(BaseModel):
    """Schema for updating a calendar event."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    all_day: Optional[bool] = None
    color: Optional[EventColor] = None
    is_completed: Optional[bool] = None


class CalendarEvent(CalendarEventBase):
    """Complete calendar event model."""

    id: UUID
    org_id: str
    project_id: UUID
    milestone_id: Optional[UUID] = Field(None, description="Informational link to a milestone")
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CalendarEventView(BaseModel):
    """Role-filtered event as returned to a requester."""

    id: UUID
    title: str
    display_title: str
    description: Optional[str] = None
    start: datetime
    end: datetime
    all_day: bool
    event_type: EventType
    color: EventColor
    is_completed: bool
    completed_at: Optional[datetime] = None
    project_id: Optional[UUID] = None
    project_name: Optional[str] = None
