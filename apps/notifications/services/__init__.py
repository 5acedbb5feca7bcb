"""Notifications app services layer."""

from .exceptions import (
    NotificationsServiceError,
    NotificationNotFoundError,
)
from .notification_management import (
    create_notification,
    notify_users,
    list_notifications,
    mark_notification_read,
    mark_group_invites_read,
)
from .automation import (
    check_expiring_subscriptions,
    check_overdue_payments,
    check_password_rotation,
    run_notification_checks,
)

__all__ = [
    # Exceptions
    'NotificationsServiceError',
    'NotificationNotFoundError',
    # Notifications
    'create_notification',
    'notify_users',
    'list_notifications',
    'mark_notification_read',
    'mark_group_invites_read',
    # Automation
    'check_expiring_subscriptions',
    'check_overdue_payments',
    'check_password_rotation',
    'run_notification_checks',
]
