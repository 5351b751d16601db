"""
Job API endpoints.

Manual trigger of the deadline alerts job and failed-alert requeue.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from deliveryops.api.deps import AlertRunner, CurrentRequester
from deliveryops.core.exceptions import NotFoundError, ValidationError
from deliveryops.models.deadline_alert import DeadlineAlert
from deliveryops.models.enums import VisibilityRole
from deliveryops.models.job import DeadlineJobResult
from deliveryops.services.calendar_access import map_role_to_visibility

router = APIRouter()


def _require_admin(requester) -> None:
    if map_role_to_visibility(requester.role) != VisibilityRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Internal role required",
        )


@router.post("/jobs/deadline-alerts/run", response_model=DeadlineJobResult)
async def run_deadline_alerts(
    requester: CurrentRequester,
    runner: AlertRunner,
) -> DeadlineJobResult:
    """Run the deadline alerts job once."""
    _require_admin(requester)
    return await runner.run()


@router.post("/alerts/{alert_id}/requeue", response_model=DeadlineAlert)
async def requeue_alert(
    alert_id: UUID,
    requester: CurrentRequester,
    runner: AlertRunner,
) -> DeadlineAlert:
    """Clear an alert's failure so the next run retries it."""
    _require_admin(requester)
    try:
        return await runner.requeue_alert(alert_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
