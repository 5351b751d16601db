"""
Milestone completion and trigger propagation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from deliveryops.core.exceptions import NotFoundError
from deliveryops.core.logger import setup_logger
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.enums import DONE_COLOR, AlertType
from deliveryops.models.milestone import MilestoneCompletionResult
from deliveryops.services.alert_builder import schedule_reminders
from deliveryops.services.notification_service import notify_milestone_completed
from deliveryops.services.recipients import resolve_vendor_user, resolve_vendor_user_id
from deliveryops.utils.datetime_utils import add_days, ensure_utc, now_utc

logger = setup_logger(__name__)


class MilestoneCompletionEngine:
    """
    Marks milestones completed and reschedules the milestones they trigger.

    Completing a milestone, in one transaction:
    1. stamps it completed with its actual date
    2. marks its calendar event completed and green
    3. moves every dependent to completion + days_after_trigger (back to pending)
    4. schedules a J-2 reminder for each moved dependent
    5. notifies the completed milestone's vendor
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        clock: Callable[[], datetime] = now_utc,
    ):
        self._uow_factory = uow_factory
        self._clock = clock

    async def complete(
        self,
        milestone_id: UUID,
        completion_date: Optional[datetime] = None,
    ) -> MilestoneCompletionResult:
        now = self._clock()
        completion_date = ensure_utc(completion_date) if completion_date else now
        triggered: list[UUID] = []

        async with self._uow_factory() as uow:
            milestone = await uow.milestones.get(milestone_id)
            if milestone is None:
                raise NotFoundError(f"Milestone {milestone_id} not found")

            await uow.milestones.mark_completed(milestone_id, completion_date)
            await uow.events.mark_milestone_completed(milestone_id, completion_date, DONE_COLOR)

            project = await uow.projects.get(milestone.project_id)
            project_vendor_id = project.vendor_id if project else None

            for dependent in await uow.milestones.list_dependents(milestone_id):
                new_date = add_days(completion_date, dependent.days_after_trigger or 0)
                await uow.milestones.reschedule(dependent.id, new_date)
                await uow.events.move_milestone_event(dependent.id, new_date, new_date)
                triggered.append(dependent.id)

                recipient = await resolve_vendor_user(uow, dependent.assigned_vendor_id or project_vendor_id)
                if recipient is not None and project is not None:
                    moved = dependent.model_copy(update={"planned_date": new_date})
                    await schedule_reminders(
                        uow.alerts, moved, project.name, recipient, (AlertType.REMINDER_J2,), now
                    )

            vendor_user_id = await resolve_vendor_user_id(uow, milestone.assigned_vendor_id)
            if vendor_user_id is not None:
                await notify_milestone_completed(uow.notifications, milestone, vendor_user_id)

            await uow.commit()

        logger.info(f"Milestone {milestone_id} completed; triggered {len(triggered)} dependent(s)")
        return MilestoneCompletionResult(success=True, triggered_milestone_ids=triggered)
