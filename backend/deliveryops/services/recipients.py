"""
Alert recipient resolution.

A vendor reaches the scheduler through its portal user: vendor -> user_id -> user.
Any missing link means "no recipient", never an error.
"""

from typing import Optional
from uuid import UUID

from deliveryops.core.logger import setup_logger
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.reference import User

logger = setup_logger(__name__)


async def resolve_vendor_user_id(uow: IUnitOfWork, vendor_id: Optional[UUID]) -> Optional[str]:
    """Return the portal user ID of a vendor, if any."""
    if vendor_id is None:
        return None
    vendor = await uow.vendors.get(vendor_id)
    if vendor is None or not vendor.user_id:
        logger.debug(f"Vendor {vendor_id} has no portal user")
        return None
    return vendor.user_id


async def resolve_vendor_user(uow: IUnitOfWork, vendor_id: Optional[UUID]) -> Optional[User]:
    """Return the portal user of a vendor, if it exists."""
    user_id = await resolve_vendor_user_id(uow, vendor_id)
    if user_id is None:
        return None
    user = await uow.users.get(user_id)
    if user is None:
        logger.debug(f"User {user_id} of vendor {vendor_id} not found")
    return user
