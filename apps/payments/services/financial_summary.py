"""
Monthly financial summaries.

A summary row is derived data: it can be dropped and rebuilt from the
completed payments at any time. ``total_saved`` is what the member would
have paid for the whole subscription minus what they actually paid,
floored at zero per payment.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Case, DecimalField, F, Sum, Value, When
from django.db.models.functions import ExtractMonth, ExtractYear

from apps.accounts.models import User
from apps.payments.models import FinancialSummary, Payment, PaymentStatus

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

SAVED_PER_PAYMENT = Case(
    When(
        subscription__total_price__gt=F('amount'),
        then=F('subscription__total_price') - F('amount'),
    ),
    default=Value(ZERO),
    output_field=DecimalField(max_digits=12, decimal_places=2),
)


def _completed_payments():
    return Payment.objects.filter(status=PaymentStatus.COMPLETED, paid_at__isnull=False)


@transaction.atomic
def rebuild_financial_summary(*, user: User, year: int, month: int) -> FinancialSummary:
    """Recompute the (user, year, month) summary from completed payments."""
    totals = (
        _completed_payments()
        .filter(user=user, paid_at__year=year, paid_at__month=month)
        .aggregate(total_paid=Sum('amount'), total_saved=Sum(SAVED_PER_PAYMENT))
    )

    summary, _ = FinancialSummary.objects.update_or_create(
        user=user,
        year=year,
        month=month,
        defaults={
            'total_paid': totals['total_paid'] or ZERO,
            'total_saved': totals['total_saved'] or ZERO,
        },
    )
    return summary


def rebuild_all_financial_summaries(*, user: Optional[User] = None) -> int:
    """
    Rebuild every month that has completed payments.

    Args:
        user: Restrict to one user; all users when None

    Returns:
        Number of summary rows written
    """
    payments = _completed_payments()
    if user is not None:
        payments = payments.filter(user=user)

    periods = (
        payments
        .annotate(year=ExtractYear('paid_at'), month=ExtractMonth('paid_at'))
        .values_list('user_id', 'year', 'month')
        .distinct()
        .order_by()
    )

    users = {}
    written = 0
    for user_id, year, month in periods:
        if user_id not in users:
            users[user_id] = User.objects.get(id=user_id)
        rebuild_financial_summary(user=users[user_id], year=year, month=month)
        written += 1

    logger.info("Rebuilt %d financial summaries", written)
    return written
