"""
Milestone repository interface.

Defines the contract for delivery milestone data operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from deliveryops.models.enums import MilestoneStatus
from deliveryops.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate


class IMilestoneRepository(ABC):
    """Interface for milestone repository operations."""

    @abstractmethod
    async def create(self, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        pass

    @abstractmethod
    async def get(self, milestone_id: UUID) -> Milestone | None:
        """Get a milestone by ID."""
        pass

    @abstractmethod
    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List milestones for a project, ordered by planned date."""
        pass

    @abstractmethod
    async def list_dependents(self, milestone_id: UUID) -> list[Milestone]:
        """List milestones whose trigger is the given milestone."""
        pass

    @abstractmethod
    async def list_due_pending(self, now: datetime) -> list[Milestone]:
        """List pending milestones whose planned date is at or before now."""
        pass

    @abstractmethod
    async def set_trigger(self, milestone_id: UUID, trigger_id: UUID, days_after_trigger: int) -> None:
        """Link a milestone to the milestone whose completion reschedules it."""
        pass

    @abstractmethod
    async def mark_completed(self, milestone_id: UUID, actual_date: datetime) -> None:
        """Set status completed and the actual completion date."""
        pass

    @abstractmethod
    async def reschedule(self, milestone_id: UUID, planned_date: datetime) -> None:
        """Move the planned date and reset the status to pending."""
        pass

    @abstractmethod
    async def set_status(self, milestone_id: UUID, status: MilestoneStatus) -> None:
        """Set the milestone status."""
        pass

    @abstractmethod
    async def update(self, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Apply a partial update. Raises NotFoundError if missing."""
        pass
