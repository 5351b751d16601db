"""
Notification repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from deliveryops.models.notification import Notification, NotificationCreate


class INotificationRepository(ABC):
    """Abstract interface for notification persistence."""

    @abstractmethod
    async def create(self, notification: NotificationCreate) -> Notification:
        """Create a new notification."""
        pass

    @abstractmethod
    async def list(self, user_id: str, limit: int = 50) -> list[Notification]:
        """List notifications for a user, newest first."""
        pass
