"""
SQLite implementation of calendar event repository.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from deliveryops.core.exceptions import NotFoundError, ValidationError
from deliveryops.infrastructure.local.database import ProjectCalendarEventORM, ProjectORM
from deliveryops.interfaces.calendar_event_repository import ICalendarEventRepository
from deliveryops.models.calendar_event import CalendarEvent, CalendarEventCreate, CalendarEventUpdate
from deliveryops.models.enums import EventColor, EventType, VisibilityRole
from deliveryops.utils.datetime_utils import ensure_utc, now_utc


class SqliteCalendarEventRepository(ICalendarEventRepository):
    """SQLite implementation of calendar event repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _orm_to_model(self, orm: ProjectCalendarEventORM) -> CalendarEvent:
        roles = orm.visible_to_roles
        if roles is None:
            roles = [VisibilityRole.ADMIN.value]
        return CalendarEvent(
            id=UUID(orm.id),
            org_id=orm.org_id,
            project_id=UUID(orm.project_id),
            milestone_id=UUID(orm.milestone_id) if orm.milestone_id else None,
            title=orm.title,
            description=orm.description,
            start=ensure_utc(orm.start),
            end=ensure_utc(orm.end),
            all_day=bool(orm.all_day),
            event_type=EventType(orm.event_type),
            color=EventColor(orm.color),
            is_completed=bool(orm.is_completed),
            completed_at=ensure_utc(orm.completed_at),
            visible_to_roles=[VisibilityRole(r) for r in roles],
            assigned_vendor_id=UUID(orm.assigned_vendor_id) if orm.assigned_vendor_id else None,
            assigned_user_id=orm.assigned_user_id,
            created_by_id=orm.created_by_id,
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
        )

    async def create(self, org_id: str, project_id: UUID, event: CalendarEventCreate) -> CalendarEvent:
        now = now_utc()
        orm = ProjectCalendarEventORM(
            id=str(uuid4()),
            org_id=org_id,
            project_id=str(project_id),
            milestone_id=str(event.milestone_id) if event.milestone_id else None,
            title=event.title,
            description=event.description,
            start=ensure_utc(event.start),
            end=ensure_utc(event.end),
            all_day=event.all_day,
            event_type=event.event_type.value,
            color=event.color.value,
            is_completed=False,
            completed_at=None,
            visible_to_roles=[r.value for r in event.visible_to_roles],
            assigned_vendor_id=str(event.assigned_vendor_id) if event.assigned_vendor_id else None,
            assigned_user_id=event.assigned_user_id,
            created_by_id=event.created_by_id,
            created_at=now,
            updated_at=now,
        )
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def get(self, event_id: UUID) -> CalendarEvent | None:
        orm = await self._session.get(ProjectCalendarEventORM, str(event_id))
        return self._orm_to_model(orm) if orm else None

    async def get_by_milestone(self, milestone_id: UUID) -> CalendarEvent | None:
        result = await self._session.execute(
            select(ProjectCalendarEventORM)
            .where(ProjectCalendarEventORM.milestone_id == str(milestone_id))
            .limit(1)
        )
        orm = result.scalar_one_or_none()
        return self._orm_to_model(orm) if orm else None

    async def list_in_range(self, project_id: UUID, start: datetime, end: datetime) -> list[CalendarEvent]:
        result = await self._session.execute(
            select(ProjectCalendarEventORM)
            .where(
                and_(
                    ProjectCalendarEventORM.project_id == str(project_id),
                    ProjectCalendarEventORM.start >= ensure_utc(start),
                    ProjectCalendarEventORM.end <= ensure_utc(end),
                )
            )
            .order_by(ProjectCalendarEventORM.start)
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_org_in_range(
        self,
        org_id: str,
        start: datetime,
        end: datetime,
    ) -> list[tuple[CalendarEvent, str]]:
        result = await self._session.execute(
            select(ProjectCalendarEventORM, ProjectORM.name)
            .join(ProjectORM, ProjectCalendarEventORM.project_id == ProjectORM.id)
            .where(
                and_(
                    ProjectCalendarEventORM.org_id == org_id,
                    ProjectCalendarEventORM.start >= ensure_utc(start),
                    ProjectCalendarEventORM.end <= ensure_utc(end),
                )
            )
            .order_by(ProjectCalendarEventORM.start)
        )
        return [(self._orm_to_model(orm), name) for orm, name in result.all()]

    async def update(self, event_id: UUID, update: CalendarEventUpdate, now: datetime) -> CalendarEvent:
        orm = await self._session.get(ProjectCalendarEventORM, str(event_id))
        if not orm:
            raise NotFoundError(f"Calendar event {event_id} not found")

        update_data = update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None:
                continue
            if hasattr(value, "value"):
                value = value.value
            elif isinstance(value, datetime):
                value = ensure_utc(value)
            setattr(orm, field, value)

        if "is_completed" in update_data and update.is_completed is not None:
            orm.completed_at = ensure_utc(now) if update.is_completed else None

        if ensure_utc(orm.end) < ensure_utc(orm.start):
            raise ValidationError("end must not be before start")

        orm.updated_at = now_utc()
        await self._session.flush()
        return self._orm_to_model(orm)

    async def mark_milestone_completed(self, milestone_id: UUID, completed_at: datetime, color: EventColor) -> None:
        await self._session.execute(
            update(ProjectCalendarEventORM)
            .where(ProjectCalendarEventORM.milestone_id == str(milestone_id))
            .values(
                is_completed=True,
                completed_at=ensure_utc(completed_at),
                color=color.value,
                updated_at=now_utc(),
            )
            .execution_options(synchronize_session="fetch")
        )

    async def move_milestone_event(self, milestone_id: UUID, start: datetime, end: datetime) -> None:
        await self._session.execute(
            update(ProjectCalendarEventORM)
            .where(ProjectCalendarEventORM.milestone_id == str(milestone_id))
            .values(start=ensure_utc(start), end=ensure_utc(end), updated_at=now_utc())
            .execution_options(synchronize_session="fetch")
        )

    async def set_milestone_color(self, milestone_id: UUID, color: EventColor) -> None:
        await self._session.execute(
            update(ProjectCalendarEventORM)
            .where(ProjectCalendarEventORM.milestone_id == str(milestone_id))
            .values(color=color.value, updated_at=now_utc())
            .execution_options(synchronize_session="fetch")
        )

    async def delete(self, event_id: UUID) -> bool:
        orm = await self._session.get(ProjectCalendarEventORM, str(event_id))
        if not orm:
            return False
        await self._session.delete(orm)
        await self._session.flush()
        return True
