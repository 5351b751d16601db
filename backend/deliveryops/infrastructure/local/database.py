"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    JSON,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from deliveryops.core.config import get_settings
from deliveryops.utils.datetime_utils import now_utc


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# Reference tables (owned by the wider CRM)
# ===========================================


class ProjectORM(Base):
    """Project ORM model."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    org_id = Column(String(36), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    vendor_id = Column(String(36), nullable=True, index=True)
    account_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class VendorORM(Base):
    """Vendor ORM model."""

    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    org_id = Column(String(36), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    user_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class UserORM(Base):
    """User ORM model."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    org_id = Column(String(36), nullable=False, index=True)
    email = Column(String(320), nullable=True)
    name = Column(String(200), nullable=True)
    role = Column(String(20), default="sales")
    created_at = Column(DateTime(timezone=True), default=now_utc)


# ===========================================
# Delivery scheduling tables
# ===========================================


class DeliveryMilestoneORM(Base):
    """Delivery milestone ORM model."""

    __tablename__ = "delivery_milestones"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    org_id = Column(String(36), nullable=False, index=True)
    project_id = Column(String(36), nullable=False, index=True)
    stage = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    planned_date = Column(DateTime(timezone=True), nullable=False, index=True)
    actual_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), default="pending", index=True)
    notes = Column(Text, nullable=True)
    assigned_vendor_id = Column(String(36), nullable=True)
    visible_to_client = Column(Boolean, default=False)
    visible_to_vendor = Column(Boolean, default=True)
    # Milestone whose completion recomputes this row's planned date
    triggers_next_milestone_id = Column(String(36), nullable=True, index=True)
    days_after_trigger = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class ProjectCalendarEventORM(Base):
    """Project calendar event ORM model."""

    __tablename__ = "project_calendar_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    org_id = Column(String(36), nullable=False, index=True)
    project_id = Column(String(36), nullable=False, index=True)
    milestone_id = Column(String(36), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start = Column(DateTime(timezone=True), nullable=False, index=True)
    end = Column(DateTime(timezone=True), nullable=False)
    all_day = Column(Boolean, default=True)
    event_type = Column(String(30), default="other")
    color = Column(String(20), default="blue")
    is_completed = Column(Boolean, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    visible_to_roles = Column(JSON, nullable=True)
    assigned_vendor_id = Column(String(36), nullable=True)
    assigned_user_id = Column(String(255), nullable=True)
    created_by_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class DeadlineAlertORM(Base):
    """Deadline alert ORM model."""

    __tablename__ = "deadline_alerts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    org_id = Column(String(36), nullable=False, index=True)
    project_id = Column(String(36), nullable=False, index=True)
    milestone_id = Column(String(36), nullable=True, index=True)
    event_id = Column(String(36), nullable=True)
    recipient_user_id = Column(String(255), nullable=False)
    recipient_email = Column(String(320), nullable=True)
    alert_type = Column(String(20), nullable=False)
    channel = Column(String(10), default="both")
    scheduled_for = Column(DateTime(timezone=True), nullable=False, index=True)
    subject = Column(String(300), nullable=False)
    body = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=True, index=True)
    failed_at = Column(DateTime(timezone=True), nullable=True)
    failure_reason = Column(Text, nullable=True)
    email_sent_at = Column(DateTime(timezone=True), nullable=True)
    in_app_sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class NotificationORM(Base):
    """In-app notification ORM model."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    org_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), default="info")
    link = Column(String(500), nullable=True)
    related_entity_type = Column(String(30), nullable=True)
    related_entity_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, index=True)


# ===========================================
# Database Session Management
# ===========================================


@lru_cache()
def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine=None):
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
