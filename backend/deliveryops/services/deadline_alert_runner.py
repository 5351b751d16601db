"""
Deadline alerts job.

Two phases, run periodically:
- process_scheduled_alerts: deliver due alerts by email and in-app notification
- detect_overdue_deadlines: flip late pending milestones to overdue and warn the vendor

Every alert and every milestone is handled in its own transaction, so one bad
row never blocks the rest of the batch. Neither phase raises: errors are
collected into the returned result.
"""

from __future__ import annotations

import asyncio
import re
import time
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from deliveryops.core.config import Settings, get_settings
from deliveryops.core.exceptions import ExternalDispatchError, NotFoundError, ValidationError
from deliveryops.core.logger import setup_logger
from deliveryops.interfaces.email_sender import DeadlineReminderEmail, IEmailSender
from deliveryops.interfaces.unit_of_work import IUnitOfWork
from deliveryops.models.deadline_alert import DeadlineAlert
from deliveryops.models.enums import OVERDUE_COLOR, AlertChannel, AlertType, MilestoneStatus
from deliveryops.models.job import AlertProcessingResult, DeadlineJobResult, OverdueDetectionResult
from deliveryops.services.alert_builder import overdue_alert
from deliveryops.services.notification_service import notify_from_alert, notify_milestone_overdue
from deliveryops.services.recipients import resolve_vendor_user
from deliveryops.utils.datetime_utils import days_until, format_fr_date, now_utc

logger = setup_logger(__name__)

_SUBJECT_PREFIX = re.compile(r"^(Rappel J-\d+: |RETARD: )")

DEFAULT_VENDOR_NAME = "Sous-traitant"
DEFAULT_PROJECT_NAME = "Projet"


def milestone_name_from_subject(subject: str) -> str:
    """Strip the reminder/overdue prefix from an alert subject."""
    return _SUBJECT_PREFIX.sub("", subject, count=1)


class DeadlineAlertRunner:
    """Dispatches due deadline alerts and detects overdue milestones."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        email_sender: IEmailSender,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        settings = settings or get_settings()
        self._uow_factory = uow_factory
        self._email_sender = email_sender
        self._clock = clock
        self._batch_size = settings.ALERT_BATCH_SIZE
        self._require_all_channels = settings.ALERT_REQUIRE_ALL_CHANNELS
        self._send_timeout = settings.EMAIL_SEND_TIMEOUT_SECONDS
        self._base_url = settings.APP_BASE_URL.rstrip("/")

    # ===========================================
    # Phase 1: scheduled alerts
    # ===========================================

    async def process_scheduled_alerts(self) -> AlertProcessingResult:
        """Deliver every due alert that is neither sent nor failed."""
        now = self._clock()
        result = AlertProcessingResult()

        try:
            async with self._uow_factory() as uow:
                pending = await uow.alerts.list_pending(now, self._batch_size)
        except Exception as e:
            logger.error(f"[DeadlineAlertsJob] Failed to load pending alerts: {e}")
            result.errors.append(f"Global error: {e}")
            return result

        result.processed = len(pending)
        logger.info(f"[DeadlineAlertsJob] Found {len(pending)} alerts to process")

        for alert in pending:
            try:
                failure = await self._deliver(alert, now)
            except Exception as e:
                failure = str(e) or e.__class__.__name__
                logger.error(f"[DeadlineAlertsJob] Error processing alert {alert.id}: {failure}")
                await self._record_failure(alert.id, now, failure)

            if failure is None:
                result.sent += 1
            else:
                result.failed += 1
                result.errors.append(f"Alert {alert.id}: {failure}")

        return result

    async def _deliver(self, alert: DeadlineAlert, now: datetime) -> Optional[str]:
        """
        Deliver one alert on each of its channels.

        Returns:
            None when the alert is marked sent, otherwise the recorded failure reason
        """
        async with self._uow_factory() as uow:
            email_error: Optional[ExternalDispatchError] = None

            if alert.channel.includes_email and alert.email_sent_at is None:
                if alert.recipient_email:
                    try:
                        await self._send_email(uow, alert, now)
                        await uow.alerts.mark_channel_sent(alert.id, AlertChannel.EMAIL, now)
                    except ExternalDispatchError as e:
                        email_error = e
                        logger.error(f"[DeadlineAlertsJob] Email failed for alert {alert.id}: {e.message}")
                else:
                    logger.warning(f"[DeadlineAlertsJob] Alert {alert.id} has no recipient email; email skipped")

            if alert.channel.includes_in_app and alert.in_app_sent_at is None:
                await notify_from_alert(uow.notifications, alert)
                await uow.alerts.mark_channel_sent(alert.id, AlertChannel.IN_APP, now)

            if email_error is not None and self._require_all_channels:
                reason = f"email: {email_error.message}"
                await uow.alerts.mark_failed(alert.id, now, reason)
                await uow.commit()
                return reason

            await uow.alerts.mark_sent(alert.id, now)
            await uow.commit()

        logger.info(f"[DeadlineAlertsJob] Alert {alert.id} sent")
        return None

    async def _send_email(self, uow: IUnitOfWork, alert: DeadlineAlert, now: datetime) -> None:
        """
        Resolve the email context and send it within the timeout budget.

        Raises:
            ExternalDispatchError: If the sender fails, rejects or times out
        """
        project = await uow.projects.get(alert.project_id)
        recipient = await uow.users.get(alert.recipient_user_id)
        milestone = await uow.milestones.get(alert.milestone_id) if alert.milestone_id else None

        planned = milestone.planned_date if milestone else alert.scheduled_for
        email = DeadlineReminderEmail(
            to=alert.recipient_email,
            vendor_name=(recipient.name or recipient.email) if recipient else DEFAULT_VENDOR_NAME,
            project_name=project.name if project else DEFAULT_PROJECT_NAME,
            milestone_name=milestone_name_from_subject(alert.subject),
            planned_date=format_fr_date(planned),
            days_remaining=days_until(planned, now),
            is_overdue=alert.alert_type == AlertType.OVERDUE,
            project_link=f"{self._base_url}/projects/{alert.project_id}",
        )

        try:
            accepted = await asyncio.wait_for(
                self._email_sender.send_deadline_reminder(email),
                timeout=self._send_timeout,
            )
        except ExternalDispatchError:
            raise
        except asyncio.TimeoutError as e:
            raise ExternalDispatchError(
                f"Email send timed out after {self._send_timeout}s", channel="email"
            ) from e
        except Exception as e:
            raise ExternalDispatchError(str(e) or e.__class__.__name__, channel="email") from e

        if not accepted:
            raise ExternalDispatchError("Email provider rejected the message", channel="email")

    async def _record_failure(self, alert_id: UUID, now: datetime, reason: str) -> None:
        """Mark an alert failed in a fresh transaction."""
        try:
            async with self._uow_factory() as uow:
                await uow.alerts.mark_failed(alert_id, now, reason)
                await uow.commit()
        except Exception as e:
            logger.error(f"[DeadlineAlertsJob] Could not mark alert {alert_id} as failed: {e}")

    # ===========================================
    # Phase 2: overdue detection
    # ===========================================

    async def detect_overdue_deadlines(self) -> OverdueDetectionResult:
        """Flip pending milestones whose planned date has passed to overdue."""
        now = self._clock()
        result = OverdueDetectionResult()

        try:
            async with self._uow_factory() as uow:
                due = await uow.milestones.list_due_pending(now)
        except Exception as e:
            logger.error(f"[DeadlineAlertsJob] Failed to load overdue milestones: {e}")
            result.errors.append(f"Global error: {e}")
            return result

        result.detected = len(due)
        logger.info(f"[DeadlineAlertsJob] Found {len(due)} overdue milestones")

        for milestone in due:
            try:
                async with self._uow_factory() as uow:
                    await uow.milestones.set_status(milestone.id, MilestoneStatus.OVERDUE)
                    await uow.events.set_milestone_color(milestone.id, OVERDUE_COLOR)

                    if not await uow.alerts.exists_for_milestone(milestone.id, AlertType.OVERDUE):
                        project = await uow.projects.get(milestone.project_id)
                        project_name = project.name if project else DEFAULT_PROJECT_NAME
                        vendor_id = milestone.assigned_vendor_id or (project.vendor_id if project else None)
                        recipient = await resolve_vendor_user(uow, vendor_id)
                        if recipient is not None:
                            await uow.alerts.create(overdue_alert(milestone, project_name, recipient, now))
                            await notify_milestone_overdue(uow.notifications, milestone, project_name, recipient.id)
                        else:
                            logger.debug(f"[DeadlineAlertsJob] No recipient for overdue milestone {milestone.id}")

                    await uow.commit()
                result.updated += 1
            except Exception as e:
                logger.error(f"[DeadlineAlertsJob] Error marking milestone {milestone.id} overdue: {e}")
                result.errors.append(f"Milestone {milestone.id}: {e}")

        return result

    # ===========================================
    # Composition
    # ===========================================

    async def run(self) -> DeadlineJobResult:
        """Run both phases once."""
        executed_at = self._clock()
        started = time.perf_counter()
        logger.info("[DeadlineAlertsJob] Starting job execution...")

        alerts = await self.process_scheduled_alerts()
        overdue = await self.detect_overdue_deadlines()

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"[DeadlineAlertsJob] Completed in {duration_ms}ms: "
            f"alerts processed={alerts.processed} sent={alerts.sent} failed={alerts.failed}, "
            f"overdue detected={overdue.detected} updated={overdue.updated}"
        )
        return DeadlineJobResult(
            alerts=alerts,
            overdue=overdue,
            executed_at=executed_at,
            duration_ms=duration_ms,
        )

    # ===========================================
    # Operations
    # ===========================================

    async def requeue_alert(self, alert_id: UUID) -> DeadlineAlert:
        """
        Clear the failure of an alert so the next run retries it.

        Channels already delivered are not repeated.

        Raises:
            NotFoundError: If the alert does not exist
            ValidationError: If the alert was already sent
        """
        async with self._uow_factory() as uow:
            alert = await uow.alerts.get(alert_id)
            if alert is None:
                raise NotFoundError(f"Alert {alert_id} not found")
            if alert.sent_at is not None:
                raise ValidationError(f"Alert {alert_id} was already sent")
            await uow.alerts.clear_failure(alert_id)
            requeued = await uow.alerts.get(alert_id)
            await uow.commit()

        logger.info(f"[DeadlineAlertsJob] Alert {alert_id} requeued")
        return requeued
