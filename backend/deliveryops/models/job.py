"""
Result models of the deadline alerts job.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AlertProcessingResult(BaseModel):
    """Outcome of one pass over scheduled alerts."""

    processed: int = 0
    sent: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class OverdueDetectionResult(BaseModel):
    """Outcome of one overdue detection pass."""

    detected: int = 0
    updated: int = 0
    errors: list[str] = Field(default_factory=list)


class DeadlineJobResult(BaseModel):
    """Combined outcome of one job run."""

    alerts: AlertProcessingResult
    overdue: OverdueDetectionResult
    executed_at: datetime
    duration_ms: int = 0
