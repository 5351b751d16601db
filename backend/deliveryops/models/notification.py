"""
Notification model definitions.

In-app notifications are insert-only from the scheduler's point of view and
are read by the portals.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from deliveryops.models.enums import NotificationType


class NotificationCreate(BaseModel):
    """Schema for creating a notification."""

    org_id: str
    user_id: str = Field(..., description="Recipient user ID")
    title: str = Field(..., max_length=300)
    description: str = Field(..., max_length=2000)
    type: NotificationType = NotificationType.INFO
    link: Optional[str] = Field(None, description="Front-end path to open")
    related_entity_type: Optional[str] = Field(
        None,
        description="Related entity kind (milestone, deadline, deliverable)",
    )
    related_entity_id: Optional[str] = None


class Notification(NotificationCreate):
    """User notification model."""

    id: UUID
    is_read: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}
