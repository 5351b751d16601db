"""Abstract interfaces for infrastructure abstraction."""

from deliveryops.interfaces.calendar_event_repository import ICalendarEventRepository
from deliveryops.interfaces.deadline_alert_repository import IDeadlineAlertRepository
from deliveryops.interfaces.email_sender import DeadlineReminderEmail, IEmailSender
from deliveryops.interfaces.milestone_repository import IMilestoneRepository
from deliveryops.interfaces.notification_repository import INotificationRepository
from deliveryops.interfaces.reference_repository import (
    IProjectRepository,
    IUserRepository,
    IVendorRepository,
)
from deliveryops.interfaces.unit_of_work import IUnitOfWork

__all__ = [
    "ICalendarEventRepository",
    "IDeadlineAlertRepository",
    "DeadlineReminderEmail",
    "IEmailSender",
    "IMilestoneRepository",
    "INotificationRepository",
    "IProjectRepository",
    "IUserRepository",
    "IVendorRepository",
    "IUnitOfWork",
]
