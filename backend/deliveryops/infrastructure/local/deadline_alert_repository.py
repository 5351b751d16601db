"""
SQLite implementation of deadline alert repository.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from deliveryops.core.exceptions import NotFoundError
from deliveryops.infrastructure.local.database import DeadlineAlertORM
from deliveryops.interfaces.deadline_alert_repository import IDeadlineAlertRepository
from deliveryops.models.deadline_alert import DeadlineAlert, DeadlineAlertCreate
from deliveryops.models.enums import AlertChannel, AlertType
from deliveryops.utils.datetime_utils import ensure_utc, now_utc


class SqliteDeadlineAlertRepository(IDeadlineAlertRepository):
    """SQLite implementation of deadline alert repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _orm_to_model(self, orm: DeadlineAlertORM) -> DeadlineAlert:
        return DeadlineAlert(
            id=UUID(orm.id),
            org_id=orm.org_id,
            project_id=UUID(orm.project_id),
            milestone_id=UUID(orm.milestone_id) if orm.milestone_id else None,
            event_id=UUID(orm.event_id) if orm.event_id else None,
            recipient_user_id=orm.recipient_user_id,
            recipient_email=orm.recipient_email,
            alert_type=AlertType(orm.alert_type),
            channel=AlertChannel(orm.channel),
            scheduled_for=ensure_utc(orm.scheduled_for),
            subject=orm.subject,
            body=orm.body,
            sent_at=ensure_utc(orm.sent_at),
            failed_at=ensure_utc(orm.failed_at),
            failure_reason=orm.failure_reason,
            email_sent_at=ensure_utc(orm.email_sent_at),
            in_app_sent_at=ensure_utc(orm.in_app_sent_at),
            created_at=ensure_utc(orm.created_at),
        )

    async def _get_orm(self, alert_id: UUID) -> DeadlineAlertORM:
        orm = await self._session.get(DeadlineAlertORM, str(alert_id))
        if not orm:
            raise NotFoundError(f"Deadline alert {alert_id} not found")
        return orm

    async def create(self, alert: DeadlineAlertCreate) -> DeadlineAlert:
        orm = DeadlineAlertORM(
            id=str(uuid4()),
            org_id=alert.org_id,
            project_id=str(alert.project_id),
            milestone_id=str(alert.milestone_id) if alert.milestone_id else None,
            event_id=str(alert.event_id) if alert.event_id else None,
            recipient_user_id=alert.recipient_user_id,
            recipient_email=alert.recipient_email,
            alert_type=alert.alert_type.value,
            channel=alert.channel.value,
            scheduled_for=ensure_utc(alert.scheduled_for),
            subject=alert.subject,
            body=alert.body,
            created_at=now_utc(),
        )
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def get(self, alert_id: UUID) -> DeadlineAlert | None:
        orm = await self._session.get(DeadlineAlertORM, str(alert_id))
        return self._orm_to_model(orm) if orm else None

    async def list_pending(self, now: datetime, limit: int) -> list[DeadlineAlert]:
        result = await self._session.execute(
            select(DeadlineAlertORM)
            .where(
                and_(
                    DeadlineAlertORM.scheduled_for <= ensure_utc(now),
                    DeadlineAlertORM.sent_at.is_(None),
                    DeadlineAlertORM.failed_at.is_(None),
                )
            )
            .order_by(DeadlineAlertORM.scheduled_for)
            .limit(limit)
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_by_milestone(self, milestone_id: UUID) -> list[DeadlineAlert]:
        result = await self._session.execute(
            select(DeadlineAlertORM)
            .where(DeadlineAlertORM.milestone_id == str(milestone_id))
            .order_by(DeadlineAlertORM.scheduled_for)
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def exists_for_milestone(self, milestone_id: UUID, alert_type: AlertType) -> bool:
        result = await self._session.execute(
            select(DeadlineAlertORM.id)
            .where(
                and_(
                    DeadlineAlertORM.milestone_id == str(milestone_id),
                    DeadlineAlertORM.alert_type == alert_type.value,
                )
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def mark_channel_sent(self, alert_id: UUID, channel: AlertChannel, at: datetime) -> None:
        orm = await self._get_orm(alert_id)
        if channel == AlertChannel.EMAIL:
            orm.email_sent_at = ensure_utc(at)
        elif channel == AlertChannel.IN_APP:
            orm.in_app_sent_at = ensure_utc(at)
        else:
            raise ValueError("mark_channel_sent expects a single channel")
        await self._session.flush()

    async def mark_sent(self, alert_id: UUID, at: datetime) -> None:
        orm = await self._get_orm(alert_id)
        orm.sent_at = ensure_utc(at)
        orm.failed_at = None
        orm.failure_reason = None
        await self._session.flush()

    async def mark_failed(self, alert_id: UUID, at: datetime, reason: str) -> None:
        orm = await self._get_orm(alert_id)
        orm.failed_at = ensure_utc(at)
        orm.failure_reason = reason[:2000]
        orm.sent_at = None
        await self._session.flush()

    async def clear_failure(self, alert_id: UUID) -> None:
        orm = await self._get_orm(alert_id)
        orm.failed_at = None
        orm.failure_reason = None
        await self._session.flush()
