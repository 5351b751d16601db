"""
SQLite implementation of Milestone repository.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from deliveryops.core.exceptions import NotFoundError
from deliveryops.infrastructure.local.database import DeliveryMilestoneORM
from deliveryops.interfaces.milestone_repository import IMilestoneRepository
from deliveryops.models.enums import MilestoneStage, MilestoneStatus
from deliveryops.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from deliveryops.utils.datetime_utils import ensure_utc, now_utc


class SqliteMilestoneRepository(IMilestoneRepository):
    """SQLite implementation of milestone repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: Session of the enclosing unit of work
        """
        self._session = session

    def _orm_to_model(self, orm: DeliveryMilestoneORM) -> Milestone:
        """Convert ORM object to Pydantic model."""
        return Milestone(
            id=UUID(orm.id),
            org_id=orm.org_id,
            project_id=UUID(orm.project_id),
            stage=MilestoneStage(orm.stage),
            title=orm.title,
            description=orm.description,
            planned_date=ensure_utc(orm.planned_date),
            actual_date=ensure_utc(orm.actual_date),
            status=MilestoneStatus(orm.status),
            notes=orm.notes,
            assigned_vendor_id=UUID(orm.assigned_vendor_id) if orm.assigned_vendor_id else None,
            visible_to_client=bool(orm.visible_to_client),
            visible_to_vendor=bool(orm.visible_to_vendor),
            triggers_next_milestone_id=(
                UUID(orm.triggers_next_milestone_id) if orm.triggers_next_milestone_id else None
            ),
            days_after_trigger=orm.days_after_trigger,
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
        )

    async def _get_orm(self, milestone_id: UUID) -> DeliveryMilestoneORM:
        orm = await self._session.get(DeliveryMilestoneORM, str(milestone_id))
        if not orm:
            raise NotFoundError(f"Milestone {milestone_id} not found")
        return orm

    async def create(self, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        now = now_utc()
        orm = DeliveryMilestoneORM(
            id=str(uuid4()),
            org_id=milestone.org_id,
            project_id=str(milestone.project_id),
            stage=milestone.stage.value,
            title=milestone.title,
            description=milestone.description,
            planned_date=ensure_utc(milestone.planned_date),
            status=milestone.status.value,
            assigned_vendor_id=str(milestone.assigned_vendor_id) if milestone.assigned_vendor_id else None,
            visible_to_client=milestone.visible_to_client,
            visible_to_vendor=milestone.visible_to_vendor,
            triggers_next_milestone_id=(
                str(milestone.triggers_next_milestone_id) if milestone.triggers_next_milestone_id else None
            ),
            days_after_trigger=milestone.days_after_trigger,
            created_at=now,
            updated_at=now,
        )
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def get(self, milestone_id: UUID) -> Milestone | None:
        """Get a milestone by ID."""
        orm = await self._session.get(DeliveryMilestoneORM, str(milestone_id))
        return self._orm_to_model(orm) if orm else None

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List milestones for a project, ordered by planned date."""
        result = await self._session.execute(
            select(DeliveryMilestoneORM)
            .where(DeliveryMilestoneORM.project_id == str(project_id))
            .order_by(DeliveryMilestoneORM.planned_date)
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_dependents(self, milestone_id: UUID) -> list[Milestone]:
        """List milestones whose trigger is the given milestone."""
        result = await self._session.execute(
            select(DeliveryMilestoneORM).where(
                DeliveryMilestoneORM.triggers_next_milestone_id == str(milestone_id)
            )
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_due_pending(self, now: datetime) -> list[Milestone]:
        """List pending milestones whose planned date is at or before now."""
        result = await self._session.execute(
            select(DeliveryMilestoneORM)
            .where(
                and_(
                    DeliveryMilestoneORM.planned_date <= ensure_utc(now),
                    DeliveryMilestoneORM.status == MilestoneStatus.PENDING.value,
                )
            )
            .order_by(DeliveryMilestoneORM.planned_date)
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def set_trigger(self, milestone_id: UUID, trigger_id: UUID, days_after_trigger: int) -> None:
        orm = await self._get_orm(milestone_id)
        orm.triggers_next_milestone_id = str(trigger_id)
        orm.days_after_trigger = days_after_trigger
        orm.updated_at = now_utc()
        await self._session.flush()

    async def mark_completed(self, milestone_id: UUID, actual_date: datetime) -> None:
        orm = await self._get_orm(milestone_id)
        orm.status = MilestoneStatus.COMPLETED.value
        orm.actual_date = ensure_utc(actual_date)
        orm.updated_at = now_utc()
        await self._session.flush()

    async def reschedule(self, milestone_id: UUID, planned_date: datetime) -> None:
        orm = await self._get_orm(milestone_id)
        orm.planned_date = ensure_utc(planned_date)
        orm.status = MilestoneStatus.PENDING.value
        orm.updated_at = now_utc()
        await self._session.flush()

    async def set_status(self, milestone_id: UUID, status: MilestoneStatus) -> None:
        orm = await self._get_orm(milestone_id)
        orm.status = status.value
        orm.updated_at = now_utc()
        await self._session.flush()

    async def update(self, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Apply a partial update."""
        orm = await self._get_orm(milestone_id)

        update_data = update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None:
                continue
            if hasattr(value, "value"):
                value = value.value
            elif isinstance(value, datetime):
                value = ensure_utc(value)
            setattr(orm, field, value)

        if orm.status == MilestoneStatus.COMPLETED.value and orm.actual_date is None:
            orm.actual_date = now_utc()
        orm.updated_at = now_utc()
        await self._session.flush()
        return self._orm_to_model(orm)
