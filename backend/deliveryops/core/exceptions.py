"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class DeliveryOpsError(Exception):
    """Base exception for deliveryops."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(DeliveryOpsError):
    """Resource not found."""

    pass


class ValidationError(DeliveryOpsError):
    """Validation error."""

    pass


class ExternalDispatchError(DeliveryOpsError):
    """Email or notification dispatch failed."""

    def __init__(self, message: str, channel: str, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.channel = channel


class InfrastructureError(DeliveryOpsError):
    """Database or other infrastructure failure."""

    pass
