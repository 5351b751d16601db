"""
SQLite implementation of the reference repositories (projects, vendors, users).
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from deliveryops.infrastructure.local.database import ProjectORM, UserORM, VendorORM
from deliveryops.interfaces.reference_repository import (
    IProjectRepository,
    IUserRepository,
    IVendorRepository,
)
from deliveryops.models.enums import UserRole
from deliveryops.models.reference import Project, User, Vendor
from deliveryops.utils.datetime_utils import now_utc


class SqliteProjectRepository(IProjectRepository):
    """SQLite implementation of project lookups."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _orm_to_model(self, orm: ProjectORM) -> Project:
        return Project(
            id=UUID(orm.id),
            org_id=orm.org_id,
            name=orm.name,
            vendor_id=UUID(orm.vendor_id) if orm.vendor_id else None,
            account_id=orm.account_id,
        )

    async def create(
        self,
        org_id: str,
        name: str,
        vendor_id: Optional[UUID] = None,
        account_id: Optional[str] = None,
    ) -> Project:
        orm = ProjectORM(
            id=str(uuid4()),
            org_id=org_id,
            name=name,
            vendor_id=str(vendor_id) if vendor_id else None,
            account_id=account_id,
            created_at=now_utc(),
        )
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def get(self, project_id: UUID) -> Project | None:
        orm = await self._session.get(ProjectORM, str(project_id))
        return self._orm_to_model(orm) if orm else None


class SqliteVendorRepository(IVendorRepository):
    """SQLite implementation of vendor lookups."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _orm_to_model(self, orm: VendorORM) -> Vendor:
        return Vendor(id=UUID(orm.id), org_id=orm.org_id, name=orm.name, user_id=orm.user_id)

    async def create(self, org_id: str, name: str, user_id: Optional[str] = None) -> Vendor:
        orm = VendorORM(id=str(uuid4()), org_id=org_id, name=name, user_id=user_id, created_at=now_utc())
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def get(self, vendor_id: UUID) -> Vendor | None:
        orm = await self._session.get(VendorORM, str(vendor_id))
        return self._orm_to_model(orm) if orm else None


class SqliteUserRepository(IUserRepository):
    """SQLite implementation of user lookups."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _orm_to_model(self, orm: UserORM) -> User:
        return User(
            id=orm.id,
            org_id=orm.org_id,
            email=orm.email,
            name=orm.name,
            role=UserRole(orm.role),
        )

    async def create(
        self,
        user_id: str,
        org_id: str,
        email: Optional[str],
        name: Optional[str] = None,
        role: UserRole = UserRole.SALES,
    ) -> User:
        orm = UserORM(
            id=user_id,
            org_id=org_id,
            email=email,
            name=name,
            role=role.value,
            created_at=now_utc(),
        )
        self._session.add(orm)
        await self._session.flush()
        return self._orm_to_model(orm)

    async def get(self, user_id: str) -> User | None:
        orm = await self._session.get(UserORM, user_id)
        return self._orm_to_model(orm) if orm else None
