"""
Notification automation checks.

Each check scans the database once and fans notifications out with
``bulk_create``. Nothing is scheduled here: the checks run when the
automation endpoint is hit or the ``run_notification_checks`` command runs.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from django.utils import timezone

from apps.notifications.models import Notification, NotificationType
from apps.subscriptions.models import Subscription, SubscriptionMember

logger = logging.getLogger(__name__)

RENEWAL_WINDOW_DAYS = 7
URGENT_DAYS = 1
IMPORTANT_DAYS = 3
PASSWORD_MAX_AGE = timedelta(days=90)


def days_until(moment: datetime, now: Optional[datetime] = None) -> int:
    """Whole days left until ``moment``, rounded up."""
    now = now or timezone.now()
    return math.ceil((moment - now).total_seconds() / 86400)


def renewal_urgency(days_left: int) -> str:
    """Title prefix for a renewal alert."""
    if days_left <= URGENT_DAYS:
        return 'URGENT'
    if days_left <= IMPORTANT_DAYS:
        return 'IMPORTANT'
    return ''


def check_expiring_subscriptions(now: Optional[datetime] = None) -> int:
    """
    Warn owners and members of subscriptions renewing within a week.

    Returns:
        Number of notifications created
    """
    now = now or timezone.now()
    expiring = (
        Subscription.objects
        .filter(
            is_active=True,
            renewal_date__gte=now,
            renewal_date__lt=now + timedelta(days=RENEWAL_WINDOW_DAYS),
        )
        .prefetch_related('members')
    )

    notifications: List[Notification] = []
    for subscription in expiring:
        days_left = days_until(subscription.renewal_date, now)
        urgency = renewal_urgency(days_left)
        title = f"{urgency}: Renewal coming up" if urgency else 'Renewal coming up'
        common = dict(
            type=NotificationType.RENEWAL_ALERT,
            subscription=subscription,
            related_entity_id=subscription.id,
            related_entity_type='subscription',
            sent_at=now,
        )

        notifications.append(Notification(
            user_id=subscription.owner_id,
            title=title,
            message=(
                f'Subscription "{subscription.name}" renews in {days_left} day(s). '
                f'Renew it to keep access.'
            ),
            action_url=f"/subscriptions/{subscription.id}/renew",
            action_text='Renew now',
            **common,
        ))
        for member in subscription.members.all():
            if member.user_id == subscription.owner_id:
                continue
            notifications.append(Notification(
                user_id=member.user_id,
                title=title,
                message=f'Subscription "{subscription.name}" renews in {days_left} day(s).',
                action_url=f"/subscriptions/{subscription.id}",
                action_text='View details',
                **common,
            ))

    Notification.objects.bulk_create(notifications)
    return len(notifications)


def check_overdue_payments(now: Optional[datetime] = None) -> int:
    """
    Remind members whose next payment is past due.

    Returns:
        Number of notifications created
    """
    now = now or timezone.now()
    overdue = (
        SubscriptionMember.objects
        .filter(next_payment_due__lt=now, subscription__is_active=True)
        .select_related('subscription')
    )

    notifications = [
        Notification(
            user_id=member.user_id,
            title='Payment overdue',
            message=f'Your payment for subscription "{member.subscription.name}" is overdue.',
            type=NotificationType.PAYMENT_OVERDUE,
            subscription=member.subscription,
            related_entity_id=member.subscription_id,
            related_entity_type='subscription',
            action_url=f"/subscriptions/{member.subscription_id}/payment",
            action_text='Pay now',
            sent_at=now,
        )
        for member in overdue
    ]

    Notification.objects.bulk_create(notifications)
    return len(notifications)


def check_password_rotation(now: Optional[datetime] = None) -> int:
    """
    Ask owners to rotate passwords older than three months.

    Returns:
        Number of notifications created
    """
    now = now or timezone.now()
    stale = Subscription.objects.filter(
        is_active=True,
        last_password_change__lt=now - PASSWORD_MAX_AGE,
    )

    notifications = [
        Notification(
            user_id=subscription.owner_id,
            title='Password change recommended',
            message=(
                f'Consider changing the password of subscription "{subscription.name}" '
                f'for security reasons.'
            ),
            type=NotificationType.PASSWORD_CHANGE,
            subscription=subscription,
            related_entity_id=subscription.id,
            related_entity_type='subscription',
            action_url=f"/subscriptions/{subscription.id}/credentials",
            action_text='Update password',
            sent_at=now,
        )
        for subscription in stale
    ]

    Notification.objects.bulk_create(notifications)
    return len(notifications)


def run_notification_checks(now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Run every automation check.

    A failing check is logged and reported as -1 so the others still run.

    Returns:
        Dict mapping check name to notifications created
    """
    now = now or timezone.now()
    checks = {
        'expiringSubscriptions': check_expiring_subscriptions,
        'overduePayments': check_overdue_payments,
        'passwordRotation': check_password_rotation,
    }

    results = {}
    for name, check in checks.items():
        try:
            results[name] = check(now)
        except Exception:
            logger.exception("Notification check %s failed", name)
            results[name] = -1

    logger.info("Notification checks finished: %s", results)
    return results
