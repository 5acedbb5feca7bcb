"""
Tests for the dashboard aggregations.
"""

import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from django.utils import timezone

from apps.access_requests.models import AccessRequest
from apps.dashboard.queries import DashboardQueries
from apps.notifications.services import create_notification
from apps.payments.models import FinancialSummary, Payment, PaymentStatus, PaymentType
from apps.subscriptions.models import SubscriptionMember


@pytest.fixture
def now():
    return timezone.now().replace(microsecond=0)


@pytest.fixture
def shared_four_ways(user, user_factory, subscription_factory):
    """100.00 subscription owned by ``user`` and split between four people."""
    members = [user_factory(f'member{i}@example.com') for i in range(3)]
    return subscription_factory(user, members=members)


@pytest.mark.django_db
class TestFinancialOverview:

    def test_share_and_savings(self, user, shared_four_ways):
        overview = DashboardQueries.financial_overview(user)

        assert overview['currentMonth'] == {
            'totalPaid': 25.0,
            'totalSaved': 75.0,
            'savingsPercentage': 75.0,
            'subscriptionCount': 1,
        }
        breakdown = overview['subscriptionBreakdown'][0]
        assert breakdown['fullPrice'] == 100.0
        assert breakdown['yourShare'] == 25.0
        assert breakdown['members'] == 4
        assert breakdown['role'] == 'admin'

    def test_several_subscriptions(self, user, member_user, subscription, subscription_factory):
        subscription_factory(
            member_user,
            members=[user],
            name='Music',
            service_name='Spotify',
            total_price=Decimal('30.00'),
        )

        overview = DashboardQueries.financial_overview(user)

        # 100 / 2 + 30 / 2
        assert overview['currentMonth']['totalPaid'] == 65.0
        assert overview['currentMonth']['totalSaved'] == 65.0
        assert overview['currentMonth']['savingsPercentage'] == 50.0
        assert [row['name'] for row in overview['subscriptionBreakdown']] == ['Family Plan', 'Music']

    def test_inactive_subscriptions_ignored(self, user, subscription):
        subscription.is_active = False
        subscription.save(update_fields=['is_active'])

        overview = DashboardQueries.financial_overview(user)

        assert overview['currentMonth'] == {
            'totalPaid': 0.0,
            'totalSaved': 0.0,
            'savingsPercentage': 0,
            'subscriptionCount': 0,
        }
        assert overview['subscriptionBreakdown'] == []

    def test_subscription_without_counted_members_is_skipped(self, user, shared_four_ways, subscription_factory):
        empty = subscription_factory(user, name='Stale', total_price=Decimal('40.00'))
        empty.current_members = 0
        empty.save(update_fields=['current_members'])

        overview = DashboardQueries.financial_overview(user)

        assert overview['currentMonth']['totalPaid'] == 25.0
        assert overview['currentMonth']['subscriptionCount'] == 1
        assert [row['name'] for row in overview['subscriptionBreakdown']] == ['Family Plan']

    def test_shares_are_rounded_to_cents(self, user, user_factory, subscription_factory):
        members = [user_factory('a@example.com'), user_factory('b@example.com')]
        subscription_factory(user, members=members, total_price=Decimal('10.00'))

        overview = DashboardQueries.financial_overview(user)

        assert overview['currentMonth']['totalPaid'] == 3.33
        assert overview['currentMonth']['totalSaved'] == 6.67

    def test_history(self, member_user, subscription):
        paid_at = datetime(2025, 3, 2, tzinfo=dt_timezone.utc)
        Payment.objects.create(
            user=member_user,
            subscription=subscription,
            amount=Decimal('50.00'),
            type=PaymentType.MONTHLY,
            status=PaymentStatus.COMPLETED,
            billing_period_start=paid_at,
            billing_period_end=paid_at + timedelta(days=30),
            paid_at=paid_at,
        )
        FinancialSummary.objects.create(
            user=member_user, year=2025, month=2,
            total_paid=Decimal('50.00'), total_saved=Decimal('50.00'),
        )
        FinancialSummary.objects.create(
            user=member_user, year=2025, month=3,
            total_paid=Decimal('50.00'), total_saved=Decimal('50.00'),
        )

        overview = DashboardQueries.financial_overview(member_user)

        assert overview['lifetime'] == {'totalPaid': 100.0, 'totalSaved': 100.0}
        assert [(s['year'], s['month']) for s in overview['monthlySummaries']] == [(2025, 3), (2025, 2)]
        payment = overview['recentPayments'][0]
        assert payment['amount'] == 50.0
        assert payment['subscriptionName'] == 'Family Plan'
        assert payment['paidAt'] == paid_at.isoformat()


@pytest.mark.django_db
class TestAlerts:

    def _renewing_in(self, subscription, now, delta):
        subscription.renewal_date = now + delta
        subscription.save(update_fields=['renewal_date'])

    def test_nothing_to_report(self, user, subscription, now):
        data = DashboardQueries.alerts(user, now=now)

        assert data['summary'] == {'critical': 0, 'warning': 0, 'info': 0, 'unreadNotifications': 0}
        assert data['lastUpdated'] == now.isoformat()

    @pytest.mark.parametrize('delta,severity', [
        (timedelta(hours=20), 'critical'),
        (timedelta(days=2, hours=6), 'warning'),
        (timedelta(days=5), 'info'),
    ])
    def test_renewal_severity(self, user, subscription, now, delta, severity):
        self._renewing_in(subscription, now, delta)

        data = DashboardQueries.alerts(user, now=now)

        assert data['summary'][severity] == 1
        alert = data['alerts'][severity][0]
        assert alert['type'] == 'subscription_expiring'
        assert alert['subscriptionId'] == str(subscription.id)
        assert alert['actionText'] == 'Renew'

    def test_members_see_renewals_too(self, member_user, subscription, now):
        self._renewing_in(subscription, now, timedelta(hours=20))

        data = DashboardQueries.alerts(member_user, now=now)

        assert data['alerts']['critical'][0]['actionText'] == 'View details'

    def test_overdue_payment_is_critical(self, member_user, subscription, now):
        SubscriptionMember.objects.filter(user=member_user).update(
            next_payment_due=now - timedelta(days=2)
        )

        data = DashboardQueries.alerts(member_user, now=now)

        alert = data['alerts']['critical'][0]
        assert alert['type'] == 'payment_overdue'
        assert alert['description'] == 'Payment is 2 day(s) overdue.'

    def test_pending_requests_for_owner(self, user, other_user, user_factory, public_subscription, now):
        AccessRequest.objects.create(user=other_user, subscription=public_subscription)
        AccessRequest.objects.create(user=user_factory('third@example.com'), subscription=public_subscription)

        data = DashboardQueries.alerts(user, now=now)

        alert = data['alerts']['info'][0]
        assert alert['type'] == 'pending_requests'
        assert alert['count'] == 2

    def test_stale_password_is_warning(self, user, subscription, now):
        subscription.last_password_change = now - timedelta(days=120)
        subscription.save(update_fields=['last_password_change'])

        data = DashboardQueries.alerts(user, now=now)

        alert = data['alerts']['warning'][0]
        assert alert['type'] == 'password_rotation'
        assert alert['description'] == 'Password has not changed in 4 months.'

    def test_unread_notifications_counted(self, user, now):
        create_notification(user=user, title='Hi', message='Unread')

        data = DashboardQueries.alerts(user, now=now)

        assert data['summary']['unreadNotifications'] == 1
