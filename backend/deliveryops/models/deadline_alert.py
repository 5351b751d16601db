"""
Deadline alert model definitions.

An alert is a scheduled, at-most-once notification tied to a milestone deadline.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from deliveryops.models.enums import AlertChannel, AlertType


class DeadlineAlertCreate(BaseModel):
    """Schema for scheduling an alert."""

    org_id: str
    project_id: UUID
    milestone_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    recipient_user_id: str
    recipient_email: Optional[str] = None
    alert_type: AlertType
    channel: AlertChannel = AlertChannel.BOTH
    scheduled_for: datetime
    subject: str = Field(..., max_length=300)
    body: str = Field(..., max_length=2000)


class DeadlineAlert(DeadlineAlertCreate):
    """Complete deadline alert model."""

    id: UUID
    sent_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    # Per-channel delivery stamps
    email_sent_at: Optional[datetime] = None
    in_app_sent_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def _single_terminal_state(self) -> "DeadlineAlert":
        if self.sent_at is not None and self.failed_at is not None:
            raise ValueError("alert cannot be both sent and failed")
        return self

    @property
    def is_pending(self) -> bool:
        return self.sent_at is None and self.failed_at is None
