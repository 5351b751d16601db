"""Pydantic models (schemas) for the application."""

from deliveryops.models.enums import (
    AlertChannel,
    AlertType,
    EventColor,
    EventType,
    MilestoneStage,
    MilestoneStatus,
    NotificationType,
    UserRole,
    VisibilityRole,
)
from deliveryops.models.milestone import (
    Milestone,
    MilestoneCompletionResult,
    MilestoneCreate,
    MilestoneStats,
    MilestoneUpdate,
)
from deliveryops.models.milestone_template import MilestoneConfig, MilestoneDefinition
from deliveryops.models.calendar_event import (
    CalendarEvent,
    CalendarEventCreate,
    CalendarEventUpdate,
    CalendarEventView,
)
from deliveryops.models.deadline_alert import DeadlineAlert, DeadlineAlertCreate
from deliveryops.models.notification import Notification, NotificationCreate
from deliveryops.models.reference import Project, User, Vendor
from deliveryops.models.job import AlertProcessingResult, DeadlineJobResult, OverdueDetectionResult

__all__ = [
    # Enums
    "AlertChannel",
    "AlertType",
    "EventColor",
    "EventType",
    "MilestoneStage",
    "MilestoneStatus",
    "NotificationType",
    "UserRole",
    "VisibilityRole",
    # Milestones
    "Milestone",
    "MilestoneCompletionResult",
    "MilestoneCreate",
    "MilestoneStats",
    "MilestoneUpdate",
    "MilestoneConfig",
    "MilestoneDefinition",
    # Calendar
    "CalendarEvent",
    "CalendarEventCreate",
    "CalendarEventUpdate",
    "CalendarEventView",
    # Alerts / notifications
    "DeadlineAlert",
    "DeadlineAlertCreate",
    "Notification",
    "NotificationCreate",
    # Reference
    "Project",
    "User",
    "Vendor",
    # Job
    "AlertProcessingResult",
    "DeadlineJobResult",
    "OverdueDetectionResult",
]
