"""
Project calendar management: ad-hoc events, milestone edits and statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from deliveryops.core.exceptions import NotFoundError
from deliveryops.core.logger import setup_logger
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.calendar_event import CalendarEvent, CalendarEventCreate, CalendarEventUpdate
from deliveryops.models.enums import DONE_COLOR, MilestoneStatus
from deliveryops.models.milestone import Milestone, MilestoneStats, MilestoneUpdate
from deliveryops.models.notification import Notification
from deliveryops.services.notification_service import notify_delivery_submitted
from deliveryops.utils.datetime_utils import now_utc

logger = setup_logger(__name__)


class ProjectCalendarService:
    """Write-side operations on a project's calendar and milestones."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        clock: Callable[[], datetime] = now_utc,
    ):
        self._uow_factory = uow_factory
        self._clock = clock

    async def create_event(self, org_id: str, project_id: UUID, data: CalendarEventCreate) -> CalendarEvent:
        """Create an ad-hoc event (not linked to a milestone)."""
        data = data.model_copy(update={"milestone_id": None})
        async with self._uow_factory() as uow:
            if await uow.projects.get(project_id) is None:
                raise NotFoundError(f"Project {project_id} not found")
            event = await uow.events.create(org_id, project_id, data)
            await uow.commit()
        return event

    async def update_event(self, event_id: UUID, data: CalendarEventUpdate) -> CalendarEvent:
        async with self._uow_factory() as uow:
            event = await uow.events.update(event_id, data, self._clock())
            await uow.commit()
        return event

    async def delete_event(self, event_id: UUID) -> bool:
        async with self._uow_factory() as uow:
            deleted = await uow.events.delete(event_id)
            await uow.commit()
        return deleted

    async def update_milestone(self, milestone_id: UUID, data: MilestoneUpdate) -> Milestone:
        """
        Edit a milestone; a new planned date moves its calendar event too.

        Completing through this path marks the event done but does not
        cascade to dependents; use MilestoneCompletionEngine.complete for that.
        """
        async with self._uow_factory() as uow:
            milestone = await uow.milestones.update(milestone_id, data)
            if data.planned_date is not None:
                await uow.events.move_milestone_event(milestone_id, milestone.planned_date, milestone.planned_date)
            if data.status == MilestoneStatus.COMPLETED:
                await uow.events.mark_milestone_completed(milestone_id, milestone.actual_date, DONE_COLOR)
            await uow.commit()
        return milestone

    async def list_project_milestones(self, project_id: UUID) -> list[Milestone]:
        async with self._uow_factory() as uow:
            return await uow.milestones.list_by_project(project_id)

    async def get_milestone_stats(self, project_id: UUID) -> MilestoneStats:
        milestones = await self.list_project_milestones(project_id)
        total = len(milestones)
        counts = {status: 0 for status in MilestoneStatus}
        for milestone in milestones:
            counts[milestone.status] += 1

        completed = counts[MilestoneStatus.COMPLETED]
        return MilestoneStats(
            total=total,
            completed=completed,
            pending=counts[MilestoneStatus.PENDING],
            in_progress=counts[MilestoneStatus.IN_PROGRESS],
            overdue=counts[MilestoneStatus.OVERDUE],
            progress=int(completed / total * 100 + 0.5) if total else 0,
        )

    async def create_delivery_confirmation(
        self,
        org_id: str,
        project_id: UUID,
        milestone_id: UUID,
        deliverable_title: str,
        submitted_by_user_id: str,
    ) -> Optional[Notification]:
        """Confirm a deliverable submission to its submitter; no-op if either is unknown."""
        async with self._uow_factory() as uow:
            project = await uow.projects.get(project_id)
            user = await uow.users.get(submitted_by_user_id)
            if project is None or user is None:
                logger.debug(f"Delivery confirmation skipped for project {project_id}")
                return None
            notification = await notify_delivery_submitted(
                uow.notifications,
                org_id=org_id,
                project_id=project_id,
                project_name=project.name,
                milestone_id=milestone_id,
                deliverable_title=deliverable_title,
                submitted_by_user_id=user.id,
            )
            await uow.commit()
        return notification
