"""API routers."""

from deliveryops.api import calendar, jobs, milestones

__all__ = [
    "calendar",
    "jobs",
    "milestones",
]
