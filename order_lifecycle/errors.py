"""Error taxonomy surfaced to callers of the order lifecycle service.

Every error carries a ``code`` matching the callable-RPC categories
(``invalid-argument``, ``unauthenticated``, ``not-found``, ...). Transport
layers map the code to their own status values.
"""


class OrderServiceError(Exception):
    """Base class for all errors reported to a caller."""

    code = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderServiceError):
    """Malformed or missing input."""

    code = "invalid-argument"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidStatusError(ValidationError):
    """Requested status is not a member of the order status enumeration."""

    def __init__(self, value: object):
        super().__init__(f"Invalid status: {value}.", field="status")
        self.value = value


class UnauthenticatedError(OrderServiceError):
    code = "unauthenticated"

    def __init__(self, message: str = "The user is not authenticated."):
        super().__init__(message)


class NotFoundError(OrderServiceError):
    code = "not-found"

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class PermissionDeniedError(OrderServiceError):
    code = "permission-denied"

    def __init__(
        self,
        message: str,
        role: str | None = None,
        current_status: str | None = None,
        requested_status: str | None = None,
    ):
        super().__init__(message)
        self.role = role
        self.current_status = current_status
        self.requested_status = requested_status


class ConflictError(OrderServiceError):
    """The order changed between read and conditional write."""

    code = "failed-precondition"

    def __init__(self, order_id: str, expected_status: str, actual_status: str | None):
        super().__init__(
            f"Order {order_id} is no longer '{expected_status}' "
            f"(now '{actual_status}'), reload and retry."
        )
        self.order_id = order_id
        self.expected_status = expected_status
        self.actual_status = actual_status


class InternalError(OrderServiceError):
    """Unexpected failure. The message never carries implementation detail."""

    code = "internal"
