"""
Base service layer patterns for business logic encapsulation.

This module provides the standard result wrapper for the service layer:
- ServiceResult: Consistent success/failure handling without exceptions

Pattern Comparison:
    - ServiceResult: Use for expected outcomes (ignored events, business rules)
    - Exceptions: Use for unexpected failures (bad signatures, provider errors)

Usage:
    from core.services import ServiceResult

    def handle_event(notification) -> ServiceResult[SubscriptionUpdate]:
        if notification.subscription_id is None:
            return ServiceResult.failure(
                "Notification has no subscription",
                error_code="MISSING_SUBSCRIPTION",
            )
        return ServiceResult.ok(build_update(notification))

    # In view
    result = dispatch_notification(notification)
    if not result:
        logger.warning(result.error)

Related:
    - core.exceptions: For unexpected/exceptional errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for logging and callers
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code

        Returns:
            ServiceResult with success=False and error details
        """
        return cls(success=False, error=error, error_code=error_code)

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.success
