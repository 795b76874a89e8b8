"""Domain exceptions for the storefront API.

Services raise these; the handlers in ``storefront.main`` turn them into
``{"success": false, "message": ...}`` responses using ERROR_STATUS_CODES.
"""
from pydantic.alias_generators import to_camel


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailedError(StorefrontError):
    """Raised when a request is well-formed JSON but semantically invalid."""

    pass


class NotFoundError(StorefrontError):
    """Raised when an order, product or cart entry does not exist."""

    pass


class AccessDeniedError(StorefrontError):
    """Raised when the caller does not own the resource."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class InsufficientStockError(ValidationFailedError):
    """Raised when a product cannot cover the requested quantity."""

    def __init__(self, product_name: str, available: int | None = None, requested: int | None = None):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient stock for {product_name}")


class PriceMismatchError(ValidationFailedError):
    """Raised when submitted totals disagree with catalog prices."""

    def __init__(self, field: str, submitted: float, expected: float):
        self.field = to_camel(field)
        self.submitted = submitted
        self.expected = expected
        super().__init__(
            f"Submitted {self.field} {submitted} does not match current catalog prices (expected {expected})"
        )


class InvalidStatusTransitionError(ValidationFailedError):
    """Raised when an order cannot move from its current status to the requested one."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}")


class OrderAlreadyPaidError(ValidationFailedError):
    """Raised when payment is confirmed twice for the same order."""

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} is already paid")


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    ValidationFailedError: 400,
    InsufficientStockError: 400,
    PriceMismatchError: 400,
    InvalidStatusTransitionError: 400,
    OrderAlreadyPaidError: 400,
    AccessDeniedError: 403,
    NotFoundError: 404,
}
