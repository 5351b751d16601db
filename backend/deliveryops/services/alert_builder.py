"""
Construction and scheduling of deadline alerts.
"""

from datetime import datetime

from deliveryops.interfaces.deadline_alert_repository import IDeadlineAlertRepository
from deliveryops.models.deadline_alert import DeadlineAlert, DeadlineAlertCreate
from deliveryops.models.enums import AlertChannel, AlertType
from deliveryops.models.milestone import Milestone
from deliveryops.models.reference import User
from deliveryops.utils.datetime_utils import format_fr_date, subtract_days

REMINDER_DAYS_BEFORE = {
    AlertType.REMINDER_J2: 2,
    AlertType.REMINDER_J1: 1,
}


def reminder_alert(
    milestone: Milestone,
    project_name: str,
    recipient: User,
    alert_type: AlertType,
) -> DeadlineAlertCreate:
    """Build a J-n reminder for a milestone's planned date."""
    days_before = REMINDER_DAYS_BEFORE[alert_type]
    when = "demain" if days_before == 1 else f"dans {days_before} jours"
    return DeadlineAlertCreate(
        org_id=milestone.org_id,
        project_id=milestone.project_id,
        milestone_id=milestone.id,
        recipient_user_id=recipient.id,
        recipient_email=recipient.email,
        alert_type=alert_type,
        channel=AlertChannel.BOTH,
        scheduled_for=subtract_days(milestone.planned_date, days_before),
        subject=f"Rappel J-{days_before}: {milestone.title}",
        body=(
            f'La deadline "{milestone.title}" pour le projet "{project_name}" est {when} '
            f"({format_fr_date(milestone.planned_date)})."
        ),
    )


def overdue_alert(
    milestone: Milestone,
    project_name: str,
    recipient: User,
    now: datetime,
) -> DeadlineAlertCreate:
    """Build the immediate overdue alert of a milestone."""
    return DeadlineAlertCreate(
        org_id=milestone.org_id,
        project_id=milestone.project_id,
        milestone_id=milestone.id,
        recipient_user_id=recipient.id,
        recipient_email=recipient.email,
        alert_type=AlertType.OVERDUE,
        channel=AlertChannel.BOTH,
        scheduled_for=now,
        subject=f"RETARD: {milestone.title}",
        body=(
            f'La deadline "{milestone.title}" pour le projet "{project_name}" est dépassée. '
            "Veuillez soumettre le livrable dès que possible."
        ),
    )


async def schedule_reminders(
    alert_repo: IDeadlineAlertRepository,
    milestone: Milestone,
    project_name: str,
    recipient: User,
    alert_types: tuple[AlertType, ...],
    now: datetime,
) -> list[DeadlineAlert]:
    """
    Schedule reminder alerts for a milestone.

    Reminders whose send time is not in the future are skipped.
    """
    created = []
    for alert_type in alert_types:
        alert = reminder_alert(milestone, project_name, recipient, alert_type)
        if alert.scheduled_for <= now:
            continue
        created.append(await alert_repo.create(alert))
    return created
