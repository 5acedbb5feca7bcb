"""
Payment recording and listing.

Payments are created pending by members. Completion happens in the back
office and is the only transition that feeds the financial summaries.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Q, Sum

from apps.accounts.models import User
from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.subscriptions.models import SubscriptionMember

from .exceptions import (
    PaymentNotFoundError,
    NotMemberError,
    PaymentAlreadyCompletedError,
)
from .financial_summary import rebuild_financial_summary

logger = logging.getLogger(__name__)


def record_payment(
    *,
    user: User,
    subscription_id: UUID,
    amount: Decimal,
    type: str,
    billing_period_start: datetime,
    billing_period_end: datetime,
    payment_method: str = '',
    external_payment_id: str = '',
    description: str = ''
) -> Payment:
    """
    Record a pending payment for one of the user's subscriptions.

    Raises:
        NotMemberError: If the user holds no slot in the subscription
    """
    try:
        membership = (
            SubscriptionMember.objects
            .select_related('subscription')
            .get(subscription_id=subscription_id, user=user)
        )
    except SubscriptionMember.DoesNotExist:
        raise NotMemberError("You are not a member of this subscription")

    payment = Payment.objects.create(
        user=user,
        subscription=membership.subscription,
        amount=amount,
        currency=membership.subscription.currency,
        type=type,
        billing_period_start=billing_period_start,
        billing_period_end=billing_period_end,
        payment_method=payment_method,
        external_payment_id=external_payment_id,
        description=description,
    )
    logger.info("Payment %s recorded for subscription %s", payment.id, subscription_id)
    return payment


def list_user_payments(
    *,
    user: User,
    subscription_id: Optional[UUID] = None,
    status: Optional[str] = None,
    limit: int = 50
) -> dict:
    """
    The user's payments, newest first, with totals over the filtered set.

    Returns:
        Dict with ``payments`` (list) and ``summary``
    """
    queryset = Payment.objects.filter(user=user)
    if subscription_id:
        queryset = queryset.filter(subscription_id=subscription_id)
    if status:
        queryset = queryset.filter(status=status)

    totals = queryset.aggregate(
        total_paid=Sum('amount', filter=Q(status=PaymentStatus.COMPLETED)),
        pending_amount=Sum('amount', filter=Q(status=PaymentStatus.PENDING)),
        total_payments=Count('id'),
    )

    return {
        'payments': list(
            queryset.select_related('subscription').order_by('-created_at')[:limit]
        ),
        'summary': {
            'totalPaid': totals['total_paid'] or Decimal('0.00'),
            'pendingAmount': totals['pending_amount'] or Decimal('0.00'),
            'totalPayments': totals['total_payments'],
        },
    }


@transaction.atomic
def complete_payment(*, payment_id: UUID) -> Payment:
    """
    Mark a payment completed and roll it into the payer's monthly summary.

    The payer's member slot gets ``last_payment`` stamped and, for monthly
    payments, ``next_payment_due`` moved to the end of the billing period.

    Raises:
        PaymentNotFoundError: If the payment doesn't exist
        PaymentAlreadyCompletedError: If it is already completed
    """
    try:
        payment = Payment.objects.select_for_update().get(id=payment_id)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError("Payment not found")

    if payment.is_completed:
        raise PaymentAlreadyCompletedError("Payment is already completed")

    payment.mark_completed()

    member_updates = {'last_payment': payment.paid_at}
    if payment.type == PaymentType.MONTHLY:
        member_updates['next_payment_due'] = payment.billing_period_end
    SubscriptionMember.objects.filter(
        subscription_id=payment.subscription_id,
        user_id=payment.user_id,
    ).update(**member_updates)

    rebuild_financial_summary(
        user=payment.user,
        year=payment.paid_at.year,
        month=payment.paid_at.month,
    )

    logger.info("Payment %s completed", payment.id)
    return payment
