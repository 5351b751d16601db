"""
Email sender interface.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class DeadlineReminderEmail(BaseModel):
    """Content of a deadline reminder email."""

    to: str
    vendor_name: str
    project_name: str
    milestone_name: str
    planned_date: str
    days_remaining: int
    is_overdue: bool = False
    project_link: str | None = None


class IEmailSender(ABC):
    """Abstract interface for outgoing email."""

    @abstractmethod
    async def send_deadline_reminder(self, email: DeadlineReminderEmail) -> bool:
        """
        Send a deadline reminder.

        Returns:
            True when the provider accepted the message, False otherwise.
            Transport errors may also be raised.
        """
        pass
