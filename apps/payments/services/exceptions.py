"""
Domain-specific exceptions for payments.

Caught in views and converted to HTTP responses.
"""


class PaymentsServiceError(Exception):
    """Base exception for payment services."""
    pass


class PaymentNotFoundError(PaymentsServiceError):
    """Raised when a payment does not exist."""
    pass


class NotMemberError(PaymentsServiceError):
    """Raised when paying for a subscription the user does not belong to."""
    pass


class PaymentAlreadyCompletedError(PaymentsServiceError):
    """Raised when completing a payment twice."""
    pass
