"""
Email sender implementations.

- LogEmailSender: renders the reminder and logs it (local development).
- WebhookEmailSender: posts the reminder to an HTTP mail relay using httpx.
"""

from __future__ import annotations

import html
from typing import Optional

import httpx

from deliveryops.core.config import Settings, get_settings
from deliveryops.core.exceptions import ExternalDispatchError
from deliveryops.core.logger import setup_logger
from deliveryops.interfaces.email_sender import DeadlineReminderEmail, IEmailSender

logger = setup_logger(__name__)


def render_deadline_reminder(email: DeadlineReminderEmail) -> tuple[str, str]:
    """Build (subject, html body) of a deadline reminder."""
    milestone_name = html.escape(email.milestone_name)
    project_name = html.escape(email.project_name)
    vendor_name = html.escape(email.vendor_name)
    project_link = html.escape(email.project_link) if email.project_link else ""

    if email.is_overdue:
        subject = f"RETARD - {email.milestone_name} ({email.project_name})"
        headline = f"La deadline « {milestone_name} » est dépassée."
        color = "#DC2626"
    elif email.days_remaining <= 1:
        subject = f"Rappel J-1 - {email.milestone_name} ({email.project_name})"
        headline = f"La deadline « {milestone_name} » est demain."
        color = "#F59E0B"
    else:
        subject = f"Rappel J-{email.days_remaining} - {email.milestone_name} ({email.project_name})"
        headline = f"La deadline « {milestone_name} » est dans {email.days_remaining} jours."
        color = "#3B82F6"

    link_html = ""
    if project_link:
        link_html = (
            f'<p><a href="{project_link}" style="display:inline-block;background:{color};'
            f'color:white;padding:10px 20px;text-decoration:none;border-radius:4px;">'
            f"Ouvrir le projet</a></p>"
        )

    body = f"""
    <html>
    <body style="font-family: Arial, sans-serif;">
        <div style="max-width:600px;margin:0 auto;">
            <div style="background:{color};color:white;padding:16px;">
                <h2 style="margin:0;">{project_name}</h2>
            </div>
            <div style="padding:24px;">
                <p>Bonjour {vendor_name},</p>
                <p><strong>{headline}</strong></p>
                <p>Date prévue : {email.planned_date}</p>
                {link_html}
            </div>
        </div>
    </body>
    </html>
    """
    return subject, body


class LogEmailSender(IEmailSender):
    """Logs reminders instead of sending them."""

    async def send_deadline_reminder(self, email: DeadlineReminderEmail) -> bool:
        subject, _ = render_deadline_reminder(email)
        logger.info(f"[email:log] to={email.to} subject={subject!r}")
        return True


class WebhookEmailSender(IEmailSender):
    """Sends reminders through an HTTP mail relay."""

    def __init__(
        self,
        url: str,
        sender: str,
        token: str = "",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not url:
            raise ValueError("EMAIL_WEBHOOK_URL is required for the webhook email provider")
        self._url = url
        self._sender = sender
        self._token = token
        self._timeout = timeout
        self._client = client

    async def send_deadline_reminder(self, email: DeadlineReminderEmail) -> bool:
        subject, html = render_deadline_reminder(email)
        payload = {"from": self._sender, "to": email.to, "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}

        try:
            if self._client is not None:
                response = await self._client.post(self._url, json=payload, headers=headers, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ExternalDispatchError(f"Email relay unreachable: {exc}", channel="email") from exc

        if response.status_code in (200, 201, 202):
            logger.info(f"Email sent to {email.to}: {subject}")
            return True

        logger.error(f"Email relay rejected message to {email.to}: HTTP {response.status_code}")
        return False


def build_email_sender(settings: Optional[Settings] = None) -> IEmailSender:
    """Select the email sender configured by EMAIL_PROVIDER."""
    settings = settings or get_settings()
    if settings.EMAIL_PROVIDER == "webhook":
        return WebhookEmailSender(
            url=settings.EMAIL_WEBHOOK_URL,
            sender=settings.EMAIL_FROM,
            token=settings.EMAIL_WEBHOOK_TOKEN,
            timeout=settings.EMAIL_SEND_TIMEOUT_SECONDS,
        )
    return LogEmailSender()
