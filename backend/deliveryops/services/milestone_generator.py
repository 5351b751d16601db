"""
Milestone chain generation for new projects.

Turns a template into persisted milestones, their calendar events and the
initial J-2/J-1 reminders, all in one transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from deliveryops.core.exceptions import NotFoundError
from deliveryops.core.logger import setup_logger
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.calendar_event import CalendarEventCreate
from deliveryops.models.enums import AlertType, MilestoneStage
from deliveryops.models.milestone import Milestone, MilestoneCreate
from deliveryops.models.milestone_template import MilestoneConfig, MilestoneDefinition
from deliveryops.services.alert_builder import schedule_reminders
from deliveryops.services.milestone_template import build_default_template, validate_template
from deliveryops.services.recipients import resolve_vendor_user
from deliveryops.utils.datetime_utils import add_days, ensure_utc, now_utc

logger = setup_logger(__name__)

INITIAL_REMINDERS = (AlertType.REMINDER_J2, AlertType.REMINDER_J1)


class MilestoneGenerator:
    """Creates the delivery milestone chain of a project."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        config: Optional[MilestoneConfig] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._clock = clock

    @staticmethod
    def planned_date_for(
        definition: MilestoneDefinition,
        start_date: datetime,
        template: list[MilestoneDefinition],
    ) -> datetime:
        """
        Planned date of a template entry.

        Offset-based entries are start + offset. Trigger-based entries get a
        placeholder of (trigger's placeholder) + days_after_trigger, replaced
        once the trigger actually completes.
        """
        if definition.days_offset is not None:
            return add_days(start_date, definition.days_offset)
        by_stage = {d.stage: d for d in template}
        trigger = by_stage[definition.triggered_by]
        return add_days(
            MilestoneGenerator.planned_date_for(trigger, start_date, template),
            definition.days_after_trigger or 0,
        )

    async def generate(
        self,
        org_id: str,
        project_id: UUID,
        start_date: datetime,
        vendor_id: Optional[UUID] = None,
        config: Optional[MilestoneConfig] = None,
        template: Optional[list[MilestoneDefinition]] = None,
    ) -> list[Milestone]:
        """
        Generate milestones, events and reminders for a project.

        Calling this twice for the same project creates two chains.

        Args:
            org_id: Organization ID
            project_id: Project ID
            start_date: Project start (day zero of the template)
            vendor_id: Vendor assigned to the chain (defaults to the project's vendor)
            config: Day offsets of the default template
            template: Custom template (overrides config)

        Returns:
            Created milestones in template order

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the template is inconsistent
        """
        config = config or self._config or MilestoneConfig.from_settings()
        template = template or build_default_template(config)
        validate_template(template)
        start_date = ensure_utc(start_date)
        now = self._clock()

        async with self._uow_factory() as uow:
            project = await uow.projects.get(project_id)
            if project is None or project.org_id != org_id:
                raise NotFoundError(f"Project {project_id} not found")

            assigned_vendor_id = vendor_id or project.vendor_id
            recipient = await resolve_vendor_user(uow, assigned_vendor_id)
            if recipient is None:
                logger.debug(f"No alert recipient for project {project_id}; reminders skipped")

            created: dict[MilestoneStage, Milestone] = {}
            for definition in template:
                planned_date = self.planned_date_for(definition, start_date, template)
                milestone = await uow.milestones.create(MilestoneCreate(
                    org_id=org_id,
                    project_id=project_id,
                    stage=definition.stage,
                    title=definition.title,
                    description=definition.description,
                    planned_date=planned_date,
                    assigned_vendor_id=assigned_vendor_id,
                    visible_to_client=definition.visible_to_client,
                    visible_to_vendor=definition.visible_to_vendor,
                ))
                created[definition.stage] = milestone

                await uow.events.create(org_id, project_id, CalendarEventCreate(
                    milestone_id=milestone.id,
                    title=definition.title,
                    description=definition.description,
                    start=planned_date,
                    end=planned_date,
                    all_day=True,
                    event_type=definition.event_type,
                    color=definition.color,
                    visible_to_roles=definition.visible_to_roles,
                    assigned_vendor_id=assigned_vendor_id,
                ))

                if recipient is not None and not definition.is_trigger_based:
                    await schedule_reminders(
                        uow.alerts, milestone, project.name, recipient, INITIAL_REMINDERS, now
                    )

            # Wire triggers once every stage of the chain exists
            for definition in template:
                if definition.is_trigger_based:
                    await uow.milestones.set_trigger(
                        created[definition.stage].id,
                        created[definition.triggered_by].id,
                        definition.days_after_trigger,
                    )

            milestones = [await uow.milestones.get(m.id) for m in created.values()]
            await uow.commit()

        logger.info(f"Generated {len(milestones)} milestones for project {project_id}")
        return milestones
