from datetime import datetime
from typing import Any, Optional


class BaseAPIException(Exception):
    """
    Base exception for all API errors.

    Provides consistent structure with status_code, error_code, and details.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}


class ValidationException(BaseAPIException):
    """Invalid input data (HTTP 422)."""

    status_code = 422
    error_code = "VALIDATION_ERROR"


class BusinessException(BaseAPIException):
    """Business rule violation (HTTP 409)."""

    status_code = 409
    error_code = "BUSINESS_RULE_VIOLATION"


class NotFoundException(BaseAPIException):
    """Resource not found (HTTP 404)."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"


class SystemException(BaseAPIException):
    """Internal system error (HTTP 500)."""

    status_code = 500
    error_code = "SYSTEM_ERROR"


# Domain-specific exceptions
class InvalidConfigurationException(ValidationException):
    """Commission settings cannot be resolved into a rule."""

    error_code = "COMMISSION_INVALID_CONFIGURATION"

    def __init__(self, reason: str, restaurant_id: Optional[str] = None):
        details: dict[str, Any] = {"reason": reason}
        if restaurant_id:
            details["restaurant_id"] = restaurant_id
        super().__init__(
            message=f"Invalid commission configuration: {reason}",
            details=details,
        )


class InvalidPeriodException(ValidationException):
    """Payout period starts after it ends."""

    error_code = "PAYOUT_INVALID_PERIOD"

    def __init__(self, period_start: datetime, period_end: datetime):
        super().__init__(
            message="Payout period start must not be after period end",
            details={
                "period_start": period_start.isoformat(),
                "period_end": period_end.isoformat(),
            },
        )


class InvalidRefundException(ValidationException):
    """Refund cannot be applied to the order."""

    error_code = "ORDER_INVALID_REFUND"

    def __init__(self, order_id: int, reason: str):
        super().__init__(
            message=f"Invalid refund for order {order_id}: {reason}",
            details={"order_id": order_id, "reason": reason},
        )


class DuplicatePayoutPeriodException(BusinessException):
    """A payout already exists for this restaurant and period."""

    error_code = "PAYOUT_ALREADY_GENERATED"

    def __init__(
        self, restaurant_id: str, period_start: datetime, period_end: datetime
    ):
        super().__init__(
            message="Payout already generated for this period",
            details={
                "restaurant_id": restaurant_id,
                "period_start": period_start.isoformat(),
                "period_end": period_end.isoformat(),
            },
        )


class InvalidPayoutTransitionException(BusinessException):
    """Payout status change not allowed from its current status."""

    error_code = "PAYOUT_INVALID_TRANSITION"

    def __init__(self, payout_id: int, current: str, target: str):
        super().__init__(
            message=f"Cannot move payout from {current} to {target}",
            details={"payout_id": payout_id, "current": current, "target": target},
        )


class RestaurantNotFoundException(NotFoundException):
    """Restaurant ID not found in database."""

    error_code = "RESTAURANT_NOT_FOUND"

    def __init__(self, restaurant_id: str):
        super().__init__(
            message=f"Restaurant not found: {restaurant_id}",
            details={"restaurant_id": restaurant_id},
        )


class OrderNotFoundException(NotFoundException):
    error_code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: int):
        super().__init__(
            message=f"Order not found: {order_id}",
            details={"order_id": order_id},
        )


class PayoutNotFoundException(NotFoundException):
    error_code = "PAYOUT_NOT_FOUND"

    def __init__(self, payout_id: int):
        super().__init__(
            message=f"Payout not found: {payout_id}",
            details={"payout_id": payout_id},
        )


class RestaurantAlreadyExistsException(BusinessException):
    error_code = "RESTAURANT_ALREADY_EXISTS"

    def __init__(self, restaurant_id: str):
        super().__init__(
            message=f"Restaurant already exists: {restaurant_id}",
            details={"restaurant_id": restaurant_id},
        )
