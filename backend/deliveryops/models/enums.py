"""
Enum definitions for the application.

These enums are used across models and provide type-safe status/priority values.
"""

from enum import Enum


class MilestoneStage(str, Enum):
    """Delivery stage of a milestone."""

    AUDIT_CLIENT = "audit_client"
    PRODUCTION_V1 = "production_v1"
    PRODUCTION_V2 = "production_v2"
    IMPLEMENTATION_CLIENT = "implementation_client"
    CLIENT_FEEDBACK = "client_feedback"
    FINAL_VERSION = "final_version"


class MilestoneStatus(str, Enum):
    """
    Milestone status.

    pending -> completed (completion engine)
    pending -> overdue (overdue detection)
    overdue -> pending (cascade when the trigger completes)
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class EventType(str, Enum):
    """Calendar event type."""

    MEETING = "meeting"
    DEADLINE_INTERNAL = "deadline_internal"
    DEADLINE_CLIENT = "deadline_client"
    OTHER = "other"


class EventColor(str, Enum):
    """Semantic calendar color."""

    BLUE = "blue"
    YELLOW = "yellow"
    RED = "red"
    GREEN = "green"


# Semantic aliases
DONE_COLOR = EventColor.GREEN
OVERDUE_COLOR = EventColor.RED


class AlertType(str, Enum):
    """Deadline alert type."""

    REMINDER_J2 = "reminder_j2"
    REMINDER_J1 = "reminder_j1"
    OVERDUE = "overdue"


class AlertChannel(str, Enum):
    """Delivery channel of an alert."""

    EMAIL = "email"
    IN_APP = "in_app"
    BOTH = "both"

    @property
    def includes_email(self) -> bool:
        return self in (AlertChannel.EMAIL, AlertChannel.BOTH)

    @property
    def includes_in_app(self) -> bool:
        return self in (AlertChannel.IN_APP, AlertChannel.BOTH)


class UserRole(str, Enum):
    """Organization role of a user."""

    ADMIN = "admin"
    SALES = "sales"
    DELIVERY = "delivery"
    FINANCE = "finance"
    CLIENT_ADMIN = "client_admin"
    CLIENT_MEMBER = "client_member"
    VENDOR = "vendor"


class VisibilityRole(str, Enum):
    """Coarse visibility tag carried by calendar events."""

    ADMIN = "admin"
    CLIENT = "client"
    VENDOR = "vendor"


class NotificationType(str, Enum):
    """In-app notification severity."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
