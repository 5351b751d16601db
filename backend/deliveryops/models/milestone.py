"""
Delivery milestone model definitions.

A milestone is one checkpoint of a project's delivery plan. Milestones are
created in bulk by the generator and mutated by the completion engine and
the overdue detector.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from deliveryops.models.enums import MilestoneStage, MilestoneStatus


class MilestoneBase(BaseModel):
    """Base milestone fields."""

    org_id: str = Field(..., description="Organization ID")
    project_id: UUID = Field(..., description="Project ID")
    stage: MilestoneStage = Field(..., description="Delivery stage")
    title: str = Field(..., min_length=1, max_length=200, description="Milestone title")
    description: Optional[str] = Field(None, max_length=2000, description="Milestone description")
    planned_date: datetime = Field(..., description="Planned date")
    assigned_vendor_id: Optional[UUID] = Field(None, description="Assigned vendor")
    visible_to_client: bool = Field(False, description="Shown on the client portal")
    visible_to_vendor: bool = Field(True, description="Shown on the vendor portal")


class MilestoneCreate(MilestoneBase):
    """Schema for creating a milestone."""

    status: MilestoneStatus = MilestoneStatus.PENDING
    triggers_next_milestone_id: Optional[UUID] = None
    days_after_trigger: Optional[int] = None


class MilestoneUpdate(BaseModel):
    """Schema for updating a milestone."""

    planned_date: Optional[datetime] = None
    status: Optional[MilestoneStatus] = None
    notes: Optional[str] = Field(None, max_length=5000)


class Milestone(MilestoneBase):
    """Complete milestone model."""

    id: UUID
    status: MilestoneStatus = Field(MilestoneStatus.PENDING)
    actual_date: Optional[datetime] = Field(None, description="Completion date")
    notes: Optional[str] = None
    # Milestone whose completion recomputes this milestone's planned date
    triggers_next_milestone_id: Optional[UUID] = None
    days_after_trigger: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def _completed_has_actual_date(self) -> "Milestone":
        if self.status == MilestoneStatus.COMPLETED and self.actual_date is None:
            raise ValueError("completed milestone requires actual_date")
        return self


class MilestoneCompletionResult(BaseModel):
    """Outcome of completing a milestone."""

    success: bool
    triggered_milestone_ids: list[UUID] = Field(default_factory=list)


class MilestoneStats(BaseModel):
    """Milestone counts for one project."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    overdue: int = 0
    progress: int = Field(0, ge=0, le=100, description="Completion percentage")
