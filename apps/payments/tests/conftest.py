import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.payments.models import Payment, PaymentType


@pytest.fixture
def billing_period():
    start = timezone.now().replace(microsecond=0)
    return start, start + timedelta(days=30)


@pytest.fixture
def payment_factory(db, billing_period):
    """Factory fixture creating a pending monthly payment."""
    def create(user, subscription, amount='25.00', **fields):
        start, end = billing_period
        fields.setdefault('type', PaymentType.MONTHLY)
        fields.setdefault('billing_period_start', start)
        fields.setdefault('billing_period_end', end)
        return Payment.objects.create(
            user=user,
            subscription=subscription,
            amount=Decimal(amount),
            currency=subscription.currency,
            **fields
        )
    return create
