"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the configured
infrastructure and services. Authentication is handled upstream; the
requester's role, vendor and organization arrive as request headers.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Callable, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from deliveryops.interfaces.email_sender import IEmailSender
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.enums import UserRole
from deliveryops.services.calendar_query_service import CalendarQueryService
from deliveryops.services.deadline_alert_runner import DeadlineAlertRunner
from deliveryops.services.milestone_completion import MilestoneCompletionEngine
from deliveryops.services.milestone_generator import MilestoneGenerator
from deliveryops.services.project_calendar_service import ProjectCalendarService


# ===========================================
# Infrastructure Dependencies
# ===========================================


@lru_cache()
def get_uow_factory() -> Callable[[], IUnitOfWork]:
    """Get unit of work factory."""
    from deliveryops.infrastructure.local.unit_of_work import sqlite_uow_factory
    return sqlite_uow_factory()


@lru_cache()
def get_email_sender() -> IEmailSender:
    """Get email sender instance."""
    from deliveryops.infrastructure.local.email_sender import build_email_sender
    return build_email_sender()


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_milestone_generator() -> MilestoneGenerator:
    return MilestoneGenerator(get_uow_factory())


@lru_cache()
def get_completion_engine() -> MilestoneCompletionEngine:
    return MilestoneCompletionEngine(get_uow_factory())


@lru_cache()
def get_calendar_query_service() -> CalendarQueryService:
    return CalendarQueryService(get_uow_factory())


@lru_cache()
def get_project_calendar_service() -> ProjectCalendarService:
    return ProjectCalendarService(get_uow_factory())


@lru_cache()
def get_deadline_alert_runner() -> DeadlineAlertRunner:
    return DeadlineAlertRunner(get_uow_factory(), get_email_sender())


# ===========================================
# Requester Context
# ===========================================


@dataclass(frozen=True)
class Requester:
    """Identity of the caller as forwarded by the gateway."""

    role: UserRole
    org_id: Optional[str] = None
    vendor_id: Optional[UUID] = None


async def get_requester(
    x_user_role: Annotated[str | None, Header()] = None,
    x_org_id: Annotated[str | None, Header()] = None,
    x_vendor_id: Annotated[str | None, Header()] = None,
) -> Requester:
    """Build requester context from the X-User-Role / X-Org-Id / X-Vendor-Id headers."""
    if not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Role header is required",
        )
    try:
        role = UserRole(x_user_role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role: {x_user_role}",
        )
    vendor_id = None
    if x_vendor_id:
        try:
            vendor_id = UUID(x_vendor_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="X-Vendor-Id must be a UUID",
            )
    return Requester(role=role, org_id=x_org_id, vendor_id=vendor_id)


def require_org(requester: Requester) -> str:
    """Return the requester's organization or reject the request."""
    if not requester.org_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Org-Id header is required",
        )
    return requester.org_id


# ===========================================
# Type Aliases for Cleaner Code
# ===========================================

ChainGenerator = Annotated[MilestoneGenerator, Depends(get_milestone_generator)]
CompletionEngine = Annotated[MilestoneCompletionEngine, Depends(get_completion_engine)]
CalendarQuery = Annotated[CalendarQueryService, Depends(get_calendar_query_service)]
ProjectCalendar = Annotated[ProjectCalendarService, Depends(get_project_calendar_service)]
AlertRunner = Annotated[DeadlineAlertRunner, Depends(get_deadline_alert_runner)]
CurrentRequester = Annotated[Requester, Depends(get_requester)]
