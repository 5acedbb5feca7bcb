"""
Access request submission and listing.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.access_requests.models import AccessRequest, AccessRequestStatus
from apps.groups.models import MemberRole
from apps.notifications.models import NotificationType
from apps.notifications.services import notify_users
from apps.subscriptions.models import Subscription

from .exceptions import (
    SubscriptionNotFoundError,
    AlreadyMemberError,
    PendingRequestExistsError,
    SubscriptionFullError,
)

logger = logging.getLogger(__name__)

REQUEST_TYPES = ('sent', 'received')


@transaction.atomic
def create_access_request(
    *,
    subscription_id: UUID,
    user: User,
    message: str = ''
) -> AccessRequest:
    """
    Ask to join a public subscription.

    The owner and the subscription's admins are notified.

    Raises:
        SubscriptionNotFoundError: If missing, private or inactive
        AlreadyMemberError: If the user already holds a slot
        PendingRequestExistsError: If the user already has a pending request
        SubscriptionFullError: If the subscription has no free slot
    """
    try:
        subscription = (
            Subscription.objects
            .select_for_update()
            .select_related('owner')
            .get(id=subscription_id, is_public=True, is_active=True)
        )
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found or not public")

    if subscription.is_owner(user) or subscription.has_member(user):
        raise AlreadyMemberError("You are already a member of this subscription")

    already_pending = AccessRequest.objects.filter(
        subscription=subscription,
        user=user,
        status=AccessRequestStatus.PENDING,
    ).exists()
    if already_pending:
        raise PendingRequestExistsError("You already have a pending request for this subscription")

    if subscription.is_full:
        raise SubscriptionFullError("Subscription is full")

    access_request = AccessRequest.objects.create(
        subscription=subscription,
        user=user,
        message=message,
    )

    reviewers = User.objects.filter(
        Q(id=subscription.owner_id)
        | Q(
            subscription_memberships__subscription=subscription,
            subscription_memberships__role=MemberRole.ADMIN,
        )
    ).distinct()
    notify_users(
        users=reviewers,
        title='New access request',
        message=f"{user.get_display_name()} wants to join {subscription.name}.",
        type=NotificationType.ACCESS_REQUEST_CREATED,
        subscription=subscription,
        related_entity_id=access_request.id,
        related_entity_type='access_request',
        action_url='/access-requests',
        action_text='Review request',
    )

    logger.info("Access request %s created for subscription %s", access_request.id, subscription.id)
    return access_request


def list_access_requests(*, user: User, request_type: Optional[str] = None) -> QuerySet[AccessRequest]:
    """
    Requests sent by the user, received on subscriptions they own, or both.

    Args:
        user: Current user
        request_type: 'sent', 'received' or None for both
    """
    if request_type == 'sent':
        condition = Q(user=user)
    elif request_type == 'received':
        condition = Q(subscription__owner=user)
    else:
        condition = Q(user=user) | Q(subscription__owner=user)

    return (
        AccessRequest.objects
        .filter(condition)
        .select_related('user', 'subscription', 'responded_by')
        .order_by('-requested_at')
    )
