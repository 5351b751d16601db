"""
Calendar event repository interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from deliveryops.models.calendar_event import CalendarEvent, CalendarEventCreate, CalendarEventUpdate
from deliveryops.models.enums import EventColor


class ICalendarEventRepository(ABC):
    """Interface for project calendar event persistence."""

    @abstractmethod
    async def create(self, org_id: str, project_id: UUID, event: CalendarEventCreate) -> CalendarEvent:
        """Create a new event."""
        pass

    @abstractmethod
    async def get(self, event_id: UUID) -> CalendarEvent | None:
        """Get an event by ID."""
        pass

    @abstractmethod
    async def get_by_milestone(self, milestone_id: UUID) -> CalendarEvent | None:
        """Get the event mirroring a milestone."""
        pass

    @abstractmethod
    async def list_in_range(self, project_id: UUID, start: datetime, end: datetime) -> list[CalendarEvent]:
        """List project events starting at/after start and ending at/before end, by start."""
        pass

    @abstractmethod
    async def list_org_in_range(
        self,
        org_id: str,
        start: datetime,
        end: datetime,
    ) -> list[tuple[CalendarEvent, str]]:
        """List (event, project name) pairs across an organization's projects, by start."""
        pass

    @abstractmethod
    async def update(self, event_id: UUID, update: CalendarEventUpdate, now: datetime) -> CalendarEvent:
        """Apply a partial update. Raises NotFoundError if missing."""
        pass

    @abstractmethod
    async def mark_milestone_completed(self, milestone_id: UUID, completed_at: datetime, color: EventColor) -> None:
        """Mark the event mirroring a milestone as completed."""
        pass

    @abstractmethod
    async def move_milestone_event(self, milestone_id: UUID, start: datetime, end: datetime) -> None:
        """Move the event mirroring a milestone."""
        pass

    @abstractmethod
    async def set_milestone_color(self, milestone_id: UUID, color: EventColor) -> None:
        """Recolor the event mirroring a milestone."""
        pass

    @abstractmethod
    async def delete(self, event_id: UUID) -> bool:
        """Delete an event. Returns False if not found."""
        pass
