"""
Milestone template definitions.

A template is the ordered list of stages generated for every new project.
Each entry is timed either by a fixed offset from the project start or by a
trigger stage plus an offset applied when that trigger completes.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from deliveryops.core.config import Settings, get_settings
from deliveryops.models.enums import EventColor, EventType, MilestoneStage, VisibilityRole


class MilestoneConfig(BaseModel):
    """Day offsets (from project start) of the default plan."""

    days_to_audit: int = Field(3, ge=0)
    days_to_v1: int = Field(10, ge=0)
    days_to_v2: int = Field(17, ge=0)
    days_to_implementation: int = Field(21, ge=0)
    days_to_client_feedback: int = Field(25, ge=0)
    days_to_final_version: int = Field(30, ge=0)

    @model_validator(mode="after")
    def _final_after_feedback(self) -> "MilestoneConfig":
        if self.days_to_final_version < self.days_to_client_feedback:
            raise ValueError("days_to_final_version must be >= days_to_client_feedback")
        return self

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MilestoneConfig":
        settings = settings or get_settings()
        return cls(
            days_to_audit=settings.MILESTONE_DAYS_TO_AUDIT,
            days_to_v1=settings.MILESTONE_DAYS_TO_V1,
            days_to_v2=settings.MILESTONE_DAYS_TO_V2,
            days_to_implementation=settings.MILESTONE_DAYS_TO_IMPLEMENTATION,
            days_to_client_feedback=settings.MILESTONE_DAYS_TO_CLIENT_FEEDBACK,
            days_to_final_version=settings.MILESTONE_DAYS_TO_FINAL_VERSION,
        )


class MilestoneDefinition(BaseModel):
    """One stage of a milestone template."""

    stage: MilestoneStage
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    days_offset: Optional[int] = Field(None, ge=0, description="Days after project start")
    triggered_by: Optional[MilestoneStage] = Field(
        None,
        description="Stage whose completion fixes this stage's date",
    )
    days_after_trigger: Optional[int] = Field(None, ge=0)
    event_type: EventType
    color: EventColor
    visible_to_roles: list[VisibilityRole]
    visible_to_client: bool
    visible_to_vendor: bool

    @model_validator(mode="after")
    def _exactly_one_timing(self) -> "MilestoneDefinition":
        has_offset = self.days_offset is not None
        has_trigger = self.triggered_by is not None
        if has_offset == has_trigger:
            raise ValueError(
                f"stage {self.stage.value}: exactly one of days_offset or triggered_by is required"
            )
        if has_trigger and self.days_after_trigger is None:
            raise ValueError(f"stage {self.stage.value}: days_after_trigger is required with triggered_by")
        return self

    @property
    def is_trigger_based(self) -> bool:
        return self.triggered_by is not None
