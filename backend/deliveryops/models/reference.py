"""
Reference records owned by the wider CRM.

Projects, vendors and users are read by the scheduler to resolve names and
alert recipients; only the fields it needs are modelled.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from deliveryops.models.enums import UserRole


class Project(BaseModel):
    """Project summary."""

    id: UUID
    org_id: str
    name: str = Field(..., max_length=200)
    vendor_id: Optional[UUID] = None
    account_id: Optional[str] = None

    model_config = {"from_attributes": True}


class Vendor(BaseModel):
    """Vendor (contractor) summary."""

    id: UUID
    org_id: str
    name: str
    user_id: Optional[str] = Field(None, description="Portal user of the vendor")

    model_config = {"from_attributes": True}


class User(BaseModel):
    """Portal user summary."""

    id: str
    org_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole = UserRole.SALES

    model_config = {"from_attributes": True}
