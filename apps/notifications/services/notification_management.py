"""
Notification management service.

Creating, listing and marking notifications for a single user, plus the
fan-out helper used by other apps to notify several users at once.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.notifications.models import Notification, NotificationType

from .exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)


def create_notification(
    *,
    user: User,
    title: str,
    message: str,
    type: str = NotificationType.GENERAL,
    subscription=None,
    related_entity_id: Optional[UUID] = None,
    related_entity_type: str = '',
    action_url: str = '',
    action_text: str = '',
    scheduled_for: Optional[datetime] = None,
) -> Notification:
    """
    Create a notification for ``user``.

    Notifications without ``scheduled_for`` are considered sent immediately.
    """
    notification = Notification.objects.create(
        user=user,
        title=title,
        message=message,
        type=type,
        subscription=subscription,
        related_entity_id=related_entity_id,
        related_entity_type=related_entity_type,
        action_url=action_url,
        action_text=action_text,
        scheduled_for=scheduled_for,
        sent_at=None if scheduled_for else timezone.now(),
    )
    logger.debug("Created %s notification %s for user %s", type, notification.id, user.id)
    return notification


def notify_users(*, users: Iterable[User], title: str, message: str, **fields) -> List[Notification]:
    """Create the same notification for every user in ``users``."""
    now = timezone.now()
    notifications = [
        Notification(user=user, title=title, message=message, sent_at=now, **fields)
        for user in users
    ]
    return Notification.objects.bulk_create(notifications)


def list_notifications(
    *,
    user: User,
    unread_only: bool = False,
    type: Optional[str] = None,
    limit: int = 50,
) -> dict:
    """
    Return the user's newest notifications and their unread count.

    Returns:
        Dict with ``notifications`` (list) and ``unread_count`` (int)
    """
    queryset = Notification.objects.filter(user=user).select_related('subscription')

    if unread_only:
        queryset = queryset.filter(is_read=False)
    if type:
        queryset = queryset.filter(type=type)

    return {
        'notifications': list(queryset.order_by('-created_at')[:limit]),
        'unread_count': Notification.objects.filter(user=user, is_read=False).count(),
    }


@transaction.atomic
def mark_notification_read(*, notification_id: UUID, user: User) -> Notification:
    """
    Mark one of the user's notifications as read.

    Raises:
        NotificationNotFoundError: If the notification is missing or not the user's
    """
    try:
        notification = (
            Notification.objects
            .select_for_update()
            .get(id=notification_id, user=user)
        )
    except Notification.DoesNotExist:
        raise NotificationNotFoundError("Notification not found")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=['is_read', 'read_at'])

    return notification


def mark_group_invites_read(*, user: User, group_id: UUID) -> int:
    """Mark the user's pending invites to ``group_id`` as read."""
    return Notification.objects.filter(
        user=user,
        type=NotificationType.GROUP_INVITE,
        related_entity_id=group_id,
        is_read=False,
    ).update(is_read=True, read_at=timezone.now())
