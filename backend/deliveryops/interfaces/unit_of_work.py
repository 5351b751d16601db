"""
Unit of Work interface.

Groups the repository calls of one operation into a single transaction.
Nothing is persisted unless commit() is called; leaving the block without
committing, or because of an exception, rolls everything back.

    async with uow_factory() as uow:
        milestone = await uow.milestones.get(milestone_id)
        ...
        await uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from deliveryops.interfaces.calendar_event_repository import ICalendarEventRepository
from deliveryops.interfaces.deadline_alert_repository import IDeadlineAlertRepository
from deliveryops.interfaces.milestone_repository import IMilestoneRepository
from deliveryops.interfaces.notification_repository import INotificationRepository
from deliveryops.interfaces.reference_repository import (
    IProjectRepository,
    IUserRepository,
    IVendorRepository,
)


class IUnitOfWork(ABC):
    """Transactional scope exposing every repository the scheduler uses."""

    milestones: IMilestoneRepository
    events: ICalendarEventRepository
    alerts: IDeadlineAlertRepository
    notifications: INotificationRepository
    projects: IProjectRepository
    vendors: IVendorRepository
    users: IUserRepository

    async def __aenter__(self) -> "IUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        """Commit the transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard uncommitted changes."""
        pass
