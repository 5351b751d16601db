"""
SQLite implementation of notification repository.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from deliveryops.infrastructure.local.database import NotificationORM
from deliveryops.interfaces.notification_repository import INotificationRepository
from deliveryops.models.enums import NotificationType
from deliveryops.models.notification import Notification, NotificationCreate
from deliveryops.utils.datetime_utils import ensure_utc, now_utc


class SqliteNotificationRepository(INotificationRepository):
    """SQLite implementation of notification repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _orm_to_model(self, orm: NotificationORM) -> Notification:
        return Notification(
            id=UUID(orm.id),
            org_id=orm.org_id,
            user_id=orm.user_id,
            title=orm.title,
            description=orm.description,
            type=NotificationType(orm.type),
            link=orm.link,
            related_entity_type=orm.related_entity_type,
            related_entity_id=orm.related_entity_id,
            is_read=bool(orm.is_read),
            created_at=ensure_utc(orm.created_at),
        )

    async def create(self, notification: NotificationCreate) -> Notification:
        orm = NotificationORM(
            id=str(uuid4()),
            org_id=notification.org_id,
            user_id=notification.user_id,
            title=notification.title,
            description=notification.description,
            type=notification.type.value,
            link=notification.link,
            related_entity_type=notification.related_entity_type,
            related_entity_id=notification.related_entity_id,
            is_read=False,
            created_at=now_utc(),
        )
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def list(self, user_id: str, limit: int = 50) -> list[Notification]:
        result = await self._session.execute(
            select(NotificationORM)
            .where(NotificationORM.user_id == user_id)
            .order_by(desc(NotificationORM.created_at))
            .limit(limit)
        )
        return [self._orm_to_model(orm) for orm in result.scalars().all()]
