"""
Role-based visibility rules of the project calendar.
"""

from typing import Optional, assert_never
from uuid import UUID

from deliveryops.models.calendar_event import CalendarEvent, CalendarEventView
from deliveryops.models.enums import DONE_COLOR, UserRole, VisibilityRole

# Titles carrying these markers are internal checkpoints; clients see them without the marker
_CLIENT_TITLE_MARKERS = (
    ("V1 Interne", "Interne"),
    ("V2 Correction", "Correction"),
)


def map_role_to_visibility(role: UserRole) -> VisibilityRole:
    """Collapse a portal role into the visibility tag used on events."""
    match role:
        case UserRole.ADMIN | UserRole.SALES | UserRole.DELIVERY | UserRole.FINANCE:
            return VisibilityRole.ADMIN
        case UserRole.CLIENT_ADMIN | UserRole.CLIENT_MEMBER:
            return VisibilityRole.CLIENT
        case UserRole.VENDOR:
            return VisibilityRole.VENDOR
        case _:
            assert_never(role)


def format_title_for_role(title: str, visibility: VisibilityRole) -> str:
    """
    Rewrite an event title for the requester.

    Clients never see internal markers:
        "Production V1 Interne"   -> "Production V1"
        "Production V2 Correction" -> "Production V2"
    """
    if visibility != VisibilityRole.CLIENT:
        return title
    for needle, marker in _CLIENT_TITLE_MARKERS:
        if needle in title:
            return title.replace(marker, "", 1).strip()
    return title


def is_event_visible(
    event: CalendarEvent,
    visibility: VisibilityRole,
    vendor_id: Optional[UUID] = None,
) -> bool:
    """
    Check whether a requester may see an event.

    Vendors only see events that are unassigned or assigned to their own vendor.
    """
    if visibility not in event.visible_to_roles:
        return False
    if visibility == VisibilityRole.VENDOR and event.assigned_vendor_id is not None:
        return event.assigned_vendor_id == vendor_id
    return True


def to_event_view(
    event: CalendarEvent,
    visibility: VisibilityRole,
    project_name: Optional[str] = None,
) -> CalendarEventView:
    """Project an event for a requester; completed events render as done."""
    return CalendarEventView(
        id=event.id,
        title=event.title,
        display_title=format_title_for_role(event.title, visibility),
        description=event.description,
        start=event.start,
        end=event.end,
        all_day=event.all_day,
        event_type=event.event_type,
        color=DONE_COLOR if event.is_completed else event.color,
        is_completed=event.is_completed,
        completed_at=event.completed_at,
        project_id=event.project_id,
        project_name=project_name,
    )
