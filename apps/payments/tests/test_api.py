import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.payments.models import Payment, PaymentStatus, PaymentType


@pytest.mark.django_db
class TestCreatePayment:
    """Tests for POST /api/payments/"""

    def _data(self, subscription, billing_period, **overrides):
        start, end = billing_period
        data = {
            'subscriptionId': str(subscription.id),
            'amount': '25.00',
            'type': PaymentType.MONTHLY,
            'billingPeriodStart': start.isoformat(),
            'billingPeriodEnd': end.isoformat(),
            'paymentMethod': 'pix',
        }
        data.update(overrides)
        return data

    def test_member_records_payment(self, member_client, member_user, subscription, billing_period):
        response = member_client.post(reverse('payments:list'), self._data(subscription, billing_period))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Payment record created successfully'
        assert response.data['payment']['status'] == PaymentStatus.PENDING
        assert response.data['payment']['amount'] == Decimal('25.00')
        assert response.data['payment']['currency'] == subscription.currency

        payment = Payment.objects.get(id=response.data['payment']['id'])
        assert payment.user == member_user
        assert payment.paid_at is None

    def test_outsider_cannot_record(self, other_client, subscription, billing_period):
        response = other_client.post(reverse('payments:list'), self._data(subscription, billing_period))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'You are not a member of this subscription'
        assert Payment.objects.count() == 0

    def test_period_must_not_end_before_start(self, member_client, subscription, billing_period):
        start, end = billing_period
        data = self._data(
            subscription,
            billing_period,
            billingPeriodStart=end.isoformat(),
            billingPeriodEnd=start.isoformat(),
        )
        response = member_client.post(reverse('payments:list'), data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'billingPeriodEnd' in response.data['details']

    @pytest.mark.parametrize('field,value', [
        ('amount', '0.00'),
        ('amount', '-5'),
        ('type', 'weekly'),
    ])
    def test_invalid_input(self, member_client, subscription, billing_period, field, value):
        data = self._data(subscription, billing_period, **{field: value})
        response = member_client.post(reverse('payments:list'), data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data['details']


@pytest.mark.django_db
class TestListPayments:
    """Tests for GET /api/payments/"""

    def test_list_with_summary(self, member_client, member_user, subscription, payment_factory):
        payment_factory(member_user, subscription, '25.00', status=PaymentStatus.COMPLETED)
        payment_factory(member_user, subscription, '10.00')
        payment_factory(member_user, subscription, '5.00', status=PaymentStatus.FAILED)

        response = member_client.get(reverse('payments:list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['payments']) == 3
        assert response.data['summary'] == {
            'totalPaid': Decimal('25.00'),
            'pendingAmount': Decimal('10.00'),
            'totalPayments': 3,
        }

    def test_summary_covers_whole_filtered_set(self, member_client, member_user, subscription, payment_factory):
        for _ in range(3):
            payment_factory(member_user, subscription, '10.00', status=PaymentStatus.COMPLETED)

        response = member_client.get(reverse('payments:list'), {'limit': 1})

        assert len(response.data['payments']) == 1
        assert response.data['summary']['totalPaid'] == Decimal('30.00')
        assert response.data['summary']['totalPayments'] == 3

    def test_filters(self, member_client, member_user, user, subscription, payment_factory, subscription_factory):
        other_subscription = subscription_factory(user, members=[member_user], name='Other')
        payment_factory(member_user, subscription, '10.00')
        payment_factory(member_user, other_subscription, '20.00', status=PaymentStatus.COMPLETED)

        by_subscription = member_client.get(reverse('payments:list'), {'subscriptionId': str(subscription.id)})
        by_status = member_client.get(reverse('payments:list'), {'status': PaymentStatus.COMPLETED})

        assert [p['amount'] for p in by_subscription.data['payments']] == [Decimal('10.00')]
        assert [p['subscriptionName'] for p in by_status.data['payments']] == ['Other']

    def test_only_own_payments(self, other_client, member_user, subscription, payment_factory):
        payment_factory(member_user, subscription)

        response = other_client.get(reverse('payments:list'))

        assert response.data['payments'] == []
        assert response.data['summary']['totalPayments'] == 0

    def test_empty_summary_is_zero(self, member_client):
        response = member_client.get(reverse('payments:list'))

        assert response.data['summary']['totalPaid'] == Decimal('0.00')
        assert response.data['summary']['pendingAmount'] == Decimal('0.00')

    def test_limit_bounds(self, member_client):
        response = member_client.get(reverse('payments:list'), {'limit': 101})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
