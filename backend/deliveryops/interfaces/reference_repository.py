"""
Reference data repository interfaces (projects, vendors, users).
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from deliveryops.models.enums import UserRole
from deliveryops.models.reference import Project, User, Vendor


class IProjectRepository(ABC):
    """Interface for project lookups."""

    @abstractmethod
    async def create(
        self,
        org_id: str,
        name: str,
        vendor_id: Optional[UUID] = None,
        account_id: Optional[str] = None,
    ) -> Project:
        """Create a project record."""
        pass

    @abstractmethod
    async def get(self, project_id: UUID) -> Project | None:
        """Get a project by ID."""
        pass


class IVendorRepository(ABC):
    """Interface for vendor lookups."""

    @abstractmethod
    async def create(self, org_id: str, name: str, user_id: Optional[str] = None) -> Vendor:
        """Create a vendor record."""
        pass

    @abstractmethod
    async def get(self, vendor_id: UUID) -> Vendor | None:
        """Get a vendor by ID."""
        pass


class IUserRepository(ABC):
    """Interface for user lookups."""

    @abstractmethod
    async def create(
        self,
        user_id: str,
        org_id: str,
        email: Optional[str],
        name: Optional[str] = None,
        role: UserRole = UserRole.SALES,
    ) -> User:
        """Create a user record."""
        pass

    @abstractmethod
    async def get(self, user_id: str) -> User | None:
        """Get a user by ID."""
        pass
