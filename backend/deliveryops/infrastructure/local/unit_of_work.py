"""
SQLAlchemy implementation of the Unit of Work.

One AsyncSession per unit; every repository exposed by the unit shares it,
so the whole operation commits or rolls back together.
"""

from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from deliveryops.core.exceptions import InfrastructureError
from deliveryops.infrastructure.local.calendar_event_repository import SqliteCalendarEventRepository
from deliveryops.infrastructure.local.database import get_session_factory
from deliveryops.infrastructure.local.deadline_alert_repository import SqliteDeadlineAlertRepository
from deliveryops.infrastructure.local.milestone_repository import SqliteMilestoneRepository
from deliveryops.infrastructure.local.notification_repository import SqliteNotificationRepository
from deliveryops.infrastructure.local.reference_repository import (
    SqliteProjectRepository,
    SqliteUserRepository,
    SqliteVendorRepository,
)
from deliveryops.interfaces.unit_of_work import IUnitOfWork


class SqliteUnitOfWork(IUnitOfWork):
    """Unit of work backed by a single SQLAlchemy async session."""

    def __init__(self, session_factory: Optional[Callable[[], AsyncSession]] = None):
        """
        Initialize unit of work.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()
        self._session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SqliteUnitOfWork":
        self._session = self._session_factory()
        self.milestones = SqliteMilestoneRepository(self._session)
        self.events = SqliteCalendarEventRepository(self._session)
        self.alerts = SqliteDeadlineAlertRepository(self._session)
        self.notifications = SqliteNotificationRepository(self._session)
        self.projects = SqliteProjectRepository(self._session)
        self.vendors = SqliteVendorRepository(self._session)
        self.users = SqliteUserRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            await self.rollback()
        finally:
            await self._session.close()
            self._session = None
        if isinstance(exc_val, SQLAlchemyError):
            raise InfrastructureError(f"Database error: {exc_val}") from exc_val

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            raise InfrastructureError(f"Database commit failed: {e}") from e

    async def rollback(self) -> None:
        await self._session.rollback()


def sqlite_uow_factory(session_factory: Optional[Callable[[], AsyncSession]] = None) -> Callable[[], SqliteUnitOfWork]:
    """Build a zero-argument factory of units of work sharing one session factory."""
    session_factory = session_factory or get_session_factory()
    return lambda: SqliteUnitOfWork(session_factory)
