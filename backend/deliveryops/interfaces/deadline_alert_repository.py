"""
Deadline alert repository interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from deliveryops.models.deadline_alert import DeadlineAlert, DeadlineAlertCreate
from deliveryops.models.enums import AlertChannel, AlertType


class IDeadlineAlertRepository(ABC):
    """Interface for deadline alert persistence."""

    @abstractmethod
    async def create(self, alert: DeadlineAlertCreate) -> DeadlineAlert:
        """Schedule a new alert."""
        pass

    @abstractmethod
    async def get(self, alert_id: UUID) -> DeadlineAlert | None:
        """Get an alert by ID."""
        pass

    @abstractmethod
    async def list_pending(self, now: datetime, limit: int) -> list[DeadlineAlert]:
        """List due alerts that are neither sent nor failed, oldest first."""
        pass

    @abstractmethod
    async def list_by_milestone(self, milestone_id: UUID) -> list[DeadlineAlert]:
        """List alerts of a milestone."""
        pass

    @abstractmethod
    async def exists_for_milestone(self, milestone_id: UUID, alert_type: AlertType) -> bool:
        """Check whether an alert of the given type exists for a milestone."""
        pass

    @abstractmethod
    async def mark_channel_sent(self, alert_id: UUID, channel: AlertChannel, at: datetime) -> None:
        """Record delivery on a single channel (email or in_app)."""
        pass

    @abstractmethod
    async def mark_sent(self, alert_id: UUID, at: datetime) -> None:
        """Set the terminal sent state."""
        pass

    @abstractmethod
    async def mark_failed(self, alert_id: UUID, at: datetime, reason: str) -> None:
        """Set the terminal failed state."""
        pass

    @abstractmethod
    async def clear_failure(self, alert_id: UUID) -> None:
        """Clear the failed state so the alert becomes pending again."""
        pass
