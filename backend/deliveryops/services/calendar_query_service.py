"""
Role-filtered calendar reads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from deliveryops.core.exceptions import ValidationError
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.calendar_event import CalendarEventView
from deliveryops.models.enums import UserRole
from deliveryops.services.calendar_access import is_event_visible, map_role_to_visibility, to_event_view
from deliveryops.utils.datetime_utils import ensure_utc


class CalendarQueryService:
    """Read-only access to project calendars, scoped by requester role."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]):
        self._uow_factory = uow_factory

    @staticmethod
    def _check_window(start: datetime, end: datetime) -> tuple[datetime, datetime]:
        start, end = ensure_utc(start), ensure_utc(end)
        if end < start:
            raise ValidationError("end must not be before start")
        return start, end

    async def get_filtered_events(
        self,
        project_id: UUID,
        start: datetime,
        end: datetime,
        requester_role: UserRole,
        vendor_id: Optional[UUID] = None,
    ) -> list[CalendarEventView]:
        """
        Events of one project inside [start, end], visible to the requester.

        Returns:
            Events ordered by start ascending
        """
        start, end = self._check_window(start, end)
        visibility = map_role_to_visibility(requester_role)

        async with self._uow_factory() as uow:
            events = await uow.events.list_in_range(project_id, start, end)
            project = await uow.projects.get(project_id)

        project_name = project.name if project else None
        return [
            to_event_view(event, visibility, project_name)
            for event in events
            if is_event_visible(event, visibility, vendor_id)
        ]

    async def get_org_events(
        self,
        org_id: str,
        start: datetime,
        end: datetime,
        requester_role: UserRole,
        vendor_id: Optional[UUID] = None,
    ) -> list[CalendarEventView]:
        """Events of every project of an organization, with project names."""
        start, end = self._check_window(start, end)
        visibility = map_role_to_visibility(requester_role)

        async with self._uow_factory() as uow:
            rows = await uow.events.list_org_in_range(org_id, start, end)

        return [
            to_event_view(event, visibility, project_name)
            for event, project_name in rows
            if is_event_visible(event, visibility, vendor_id)
        ]
