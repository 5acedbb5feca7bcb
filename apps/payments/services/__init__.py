"""Payments app services layer."""

from .exceptions import (
    PaymentsServiceError,
    PaymentNotFoundError,
    NotMemberError,
    PaymentAlreadyCompletedError,
)
from .payment_management import (
    record_payment,
    list_user_payments,
    complete_payment,
)
from .financial_summary import (
    rebuild_financial_summary,
    rebuild_all_financial_summaries,
)

__all__ = [
    # Exceptions
    'PaymentsServiceError',
    'PaymentNotFoundError',
    'NotMemberError',
    'PaymentAlreadyCompletedError',
    # Payments
    'record_payment',
    'list_user_payments',
    'complete_payment',
    # Summaries
    'rebuild_financial_summary',
    'rebuild_all_financial_summaries',
]
