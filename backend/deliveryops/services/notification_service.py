"""
Notification helper functions for the delivery scheduler.

Each function builds the in-app notification of one scheduler event.
"""

from deliveryops.interfaces.notification_repository import INotificationRepository
from deliveryops.models.deadline_alert import DeadlineAlert
from deliveryops.models.enums import AlertType, NotificationType
from deliveryops.models.milestone import Milestone
from deliveryops.models.notification import Notification, NotificationCreate


def project_link(project_id) -> str:
    return f"/projects/{project_id}"


async def notify_milestone_completed(
    notification_repo: INotificationRepository,
    milestone: Milestone,
    user_id: str,
) -> Notification:
    """Confirm to the vendor that a milestone was validated."""
    return await notification_repo.create(NotificationCreate(
        org_id=milestone.org_id,
        user_id=user_id,
        title="Jalon validé",
        description=f'Le jalon "{milestone.title}" a été marqué comme terminé.',
        type=NotificationType.SUCCESS,
        link=project_link(milestone.project_id),
        related_entity_type="milestone",
        related_entity_id=str(milestone.id),
    ))


async def notify_milestone_overdue(
    notification_repo: INotificationRepository,
    milestone: Milestone,
    project_name: str,
    user_id: str,
) -> Notification:
    """Warn the assigned user immediately that a milestone is late."""
    return await notification_repo.create(NotificationCreate(
        org_id=milestone.org_id,
        user_id=user_id,
        title=f"Deadline dépassée: {milestone.title}",
        description=f'Le jalon "{milestone.title}" du projet "{project_name}" est en retard.',
        type=NotificationType.WARNING,
        link=project_link(milestone.project_id),
        related_entity_type="milestone",
        related_entity_id=str(milestone.id),
    ))


async def notify_from_alert(
    notification_repo: INotificationRepository,
    alert: DeadlineAlert,
) -> Notification:
    """In-app leg of a deadline alert."""
    related_id = alert.milestone_id or alert.event_id
    return await notification_repo.create(NotificationCreate(
        org_id=alert.org_id,
        user_id=alert.recipient_user_id,
        title=alert.subject,
        description=alert.body,
        type=NotificationType.WARNING if alert.alert_type == AlertType.OVERDUE else NotificationType.INFO,
        link=project_link(alert.project_id),
        related_entity_type="deadline",
        related_entity_id=str(related_id) if related_id else None,
    ))


async def notify_delivery_submitted(
    notification_repo: INotificationRepository,
    org_id: str,
    project_id,
    project_name: str,
    milestone_id,
    deliverable_title: str,
    submitted_by_user_id: str,
) -> Notification:
    """Confirm to a vendor that a deliverable was received."""
    return await notification_repo.create(NotificationCreate(
        org_id=org_id,
        user_id=submitted_by_user_id,
        title="Livrable soumis avec succès",
        description=f'Votre livrable "{deliverable_title}" a été soumis pour le projet "{project_name}".',
        type=NotificationType.SUCCESS,
        link=project_link(project_id),
        related_entity_type="deliverable",
        related_entity_id=str(milestone_id),
    ))
