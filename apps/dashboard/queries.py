"""
Dashboard Queries
=================

Read-only aggregations behind the dashboard endpoints.

Classes:
    DashboardQueries: Static methods returning plain dicts ready for JSON.

Example:
    Financial overview for the current user::

        from apps.dashboard.queries import DashboardQueries

        overview = DashboardQueries.financial_overview(user)
        print(overview['currentMonth']['totalSaved'])

Note:
    Nothing here writes to the database. Monetary values are computed with
    ``Decimal`` and converted to floats only when the response is built.
"""

from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Q
from django.utils import timezone

from apps.access_requests.models import AccessRequest, AccessRequestStatus
from apps.notifications.models import Notification
from apps.notifications.services.automation import PASSWORD_MAX_AGE, RENEWAL_WINDOW_DAYS, days_until
from apps.payments.models import FinancialSummary, Payment
from apps.subscriptions.models import Subscription, SubscriptionMember

CENT = Decimal('0.01')
RECENT_PAYMENTS_LIMIT = 20
MONTHLY_SUMMARIES_LIMIT = 12


def _money(value):
    return float(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def _alert_severity(days_left):
    if days_left <= 1:
        return 'critical'
    if days_left <= 3:
        return 'warning'
    return 'info'


class DashboardQueries:
    """
    Aggregations for the financial dashboard and the alert digest.

    Methods:
        financial_overview: Current monthly share, savings and history.
        alerts: Renewal, payment, request and password alerts by severity.
    """

    @staticmethod
    def financial_overview(user):
        """
        Summarize what the user pays and saves by sharing subscriptions.

        For every active subscription the user belongs to, the user's share
        is ``total_price / current_members`` and the saving is the rest of
        the price. A subscription with no counted members contributes
        nothing.

        Args:
            user (User): Dashboard owner.

        Returns:
            dict: ``currentMonth``, ``lifetime``, ``subscriptionBreakdown``,
            ``recentPayments`` and ``monthlySummaries``.

        Example:
            One subscription of 100.00 split four ways::

                overview = DashboardQueries.financial_overview(user)
                overview['currentMonth']
                # {'totalPaid': 25.0, 'totalSaved': 75.0,
                #  'savingsPercentage': 75.0, 'subscriptionCount': 1}
        """
        memberships = (
            SubscriptionMember.objects
            .filter(user=user, subscription__is_active=True)
            .select_related('subscription')
            .order_by('subscription__name')
        )

        total_paid = Decimal('0')
        total_saved = Decimal('0')
        breakdown = []

        for membership in memberships:
            subscription = membership.subscription
            if subscription.current_members <= 0:
                continue

            full_price = subscription.total_price
            your_share = full_price / subscription.current_members
            savings = full_price - your_share

            total_paid += your_share
            total_saved += savings

            breakdown.append({
                'id': str(subscription.id),
                'name': subscription.name,
                'serviceName': subscription.service_name,
                'fullPrice': _money(full_price),
                'yourShare': _money(your_share),
                'savings': _money(savings),
                'members': subscription.current_members,
                'role': membership.role,
            })

        potential_total = total_paid + total_saved
        savings_percentage = (
            float((total_saved / potential_total * 100).quantize(CENT, rounding=ROUND_HALF_UP))
            if potential_total > 0 else 0
        )

        summaries = list(
            FinancialSummary.objects
            .filter(user=user)
            .order_by('-year', '-month')[:MONTHLY_SUMMARIES_LIMIT]
        )
        lifetime_paid = sum((s.total_paid for s in summaries), Decimal('0'))
        lifetime_saved = sum((s.total_saved for s in summaries), Decimal('0'))

        payments = (
            Payment.objects
            .filter(user=user)
            .select_related('subscription')
            .order_by('-created_at')[:RECENT_PAYMENTS_LIMIT]
        )

        return {
            'currentMonth': {
                'totalPaid': _money(total_paid),
                'totalSaved': _money(total_saved),
                'savingsPercentage': savings_percentage,
                'subscriptionCount': len(breakdown),
            },
            'lifetime': {
                'totalPaid': _money(lifetime_paid),
                'totalSaved': _money(lifetime_saved),
            },
            'subscriptionBreakdown': breakdown,
            'recentPayments': [
                {
                    'id': str(payment.id),
                    'subscriptionId': str(payment.subscription_id),
                    'subscriptionName': payment.subscription.name,
                    'serviceName': payment.subscription.service_name,
                    'amount': _money(payment.amount),
                    'status': payment.status,
                    'type': payment.type,
                    'createdAt': payment.created_at.isoformat(),
                    'paidAt': payment.paid_at.isoformat() if payment.paid_at else None,
                }
                for payment in payments
            ],
            'monthlySummaries': [
                {
                    'year': summary.year,
                    'month': summary.month,
                    'totalPaid': _money(summary.total_paid),
                    'totalSaved': _money(summary.total_saved),
                }
                for summary in summaries
            ],
        }

    @staticmethod
    def alerts(user, now=None):
        """
        Collect what needs the user's attention, grouped by severity.

        Args:
            user (User): Dashboard owner.
            now (datetime, optional): Reference time, defaults to now.

        Returns:
            dict: ``summary`` counts, ``alerts`` lists keyed by severity and
            ``lastUpdated``.
        """
        now = now or timezone.now()
        grouped = {'critical': [], 'warning': [], 'info': []}

        expiring = (
            Subscription.objects
            .filter(
                Q(owner=user) | Q(members__user=user),
                is_active=True,
                renewal_date__gte=now,
                renewal_date__lt=now + timedelta(days=RENEWAL_WINDOW_DAYS),
            )
            .distinct()
            .order_by('renewal_date')
        )
        for subscription in expiring:
            days_left = days_until(subscription.renewal_date, now)
            severity = _alert_severity(days_left)
            grouped[severity].append({
                'type': 'subscription_expiring',
                'severity': severity,
                'title': f"{subscription.name} renews in {days_left} day(s)",
                'description': f"The {subscription.service_name} subscription needs to be renewed.",
                'actionUrl': f"/subscriptions/{subscription.id}",
                'actionText': 'Renew' if subscription.is_owner(user) else 'View details',
                'subscriptionId': str(subscription.id),
            })

        overdue = (
            SubscriptionMember.objects
            .filter(user=user, next_payment_due__lt=now, subscription__is_active=True)
            .select_related('subscription')
        )
        for membership in overdue:
            days_overdue = days_until(now, membership.next_payment_due)
            grouped['critical'].append({
                'type': 'payment_overdue',
                'severity': 'critical',
                'title': f"Payment overdue - {membership.subscription.name}",
                'description': f"Payment is {days_overdue} day(s) overdue.",
                'actionUrl': f"/subscriptions/{membership.subscription_id}/payment",
                'actionText': 'Pay now',
                'subscriptionId': str(membership.subscription_id),
            })

        pending_requests = AccessRequest.objects.filter(
            subscription__owner=user,
            status=AccessRequestStatus.PENDING,
        ).count()
        if pending_requests:
            grouped['info'].append({
                'type': 'pending_requests',
                'severity': 'info',
                'title': f"{pending_requests} pending request(s)",
                'description': 'Access requests are waiting for your approval.',
                'actionUrl': '/access-requests',
                'actionText': 'Review',
                'count': pending_requests,
            })

        stale_passwords = Subscription.objects.filter(
            owner=user,
            is_active=True,
            last_password_change__lt=now - PASSWORD_MAX_AGE,
        )
        for subscription in stale_passwords:
            months = (now - subscription.last_password_change).days // 30
            grouped['warning'].append({
                'type': 'password_rotation',
                'severity': 'warning',
                'title': f"Old password - {subscription.name}",
                'description': f"Password has not changed in {months} months.",
                'actionUrl': f"/subscriptions/{subscription.id}/credentials",
                'actionText': 'Update password',
                'subscriptionId': str(subscription.id),
            })

        unread = Notification.objects.filter(user=user, is_read=False).count()

        return {
            'summary': {
                'critical': len(grouped['critical']),
                'warning': len(grouped['warning']),
                'info': len(grouped['info']),
                'unreadNotifications': unread,
            },
            'alerts': grouped,
            'lastUpdated': now.isoformat(),
        }
