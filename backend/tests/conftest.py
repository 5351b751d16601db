"""
Shared pytest fixtures.

Each test gets a fresh in-memory SQLite database. StaticPool keeps the single
connection alive across sessions, so units of work must never be nested.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from dataclasses import dataclass

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from deliveryops.core.config import Settings
from deliveryops.infrastructure.local.database import Base
from deliveryops.infrastructure.local.unit_of_work import sqlite_uow_factory
from deliveryops.models.enums import UserRole
from deliveryops.models.reference import Project, User, Vendor


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def uow_factory(session_factory):
    return sqlite_uow_factory(session_factory)


@pytest.fixture
def settings():
    return Settings(ENVIRONMENT="test")


@pytest.fixture
def org_id():
    return "org_test"


@pytest.fixture
def count_rows(session_factory):
    """Count rows of an ORM table outside any unit of work."""

    async def _count(orm_class, *criteria) -> int:
        async with session_factory() as session:
            stmt = select(func.count()).select_from(orm_class)
            if criteria:
                stmt = stmt.where(*criteria)
            return (await session.execute(stmt)).scalar_one()

    return _count


@dataclass
class SeededProject:
    project: Project
    vendor: Vendor
    user: User


@pytest_asyncio.fixture
async def seeded(uow_factory, org_id) -> SeededProject:
    """A project whose vendor has a portal user with an email."""
    async with uow_factory() as uow:
        user = await uow.users.create(
            "vendor_user_1",
            org_id,
            "studio@example.com",
            name="Studio Lead",
            role=UserRole.VENDOR,
        )
        vendor = await uow.vendors.create(org_id, "Studio Pixel", user_id=user.id)
        project = await uow.projects.create(org_id, "Refonte Site", vendor_id=vendor.id)
        await uow.commit()
    return SeededProject(project=project, vendor=vendor, user=user)
