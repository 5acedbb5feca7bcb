"""
Access request review: approve or reject.

Approval is the one place where three rows change together (request
status, new member slot, member counter). All three writes happen inside a
single transaction with both the request row and the subscription row
locked, so two approvals racing for the last slot cannot both succeed.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.access_requests.models import AccessRequest, AccessRequestStatus
from apps.notifications.models import NotificationType
from apps.notifications.services import create_notification
from apps.subscriptions import services as subscription_services

from .exceptions import (
    AccessRequestNotFoundError,
    InsufficientPermissionsError,
    RequestAlreadyProcessedError,
    AlreadyMemberError,
    SubscriptionFullError,
)

logger = logging.getLogger(__name__)


def _lock_request(request_id: UUID) -> AccessRequest:
    try:
        return (
            AccessRequest.objects
            .select_for_update()
            .get(id=request_id)
        )
    except AccessRequest.DoesNotExist:
        raise AccessRequestNotFoundError("Access request not found")


def _stamp(access_request: AccessRequest, status: str, reviewer: User, admin_response: str) -> None:
    access_request.status = status
    access_request.responded_by = reviewer
    access_request.responded_at = timezone.now()
    access_request.admin_response = admin_response
    access_request.save(update_fields=['status', 'responded_by', 'responded_at', 'admin_response'])


@transaction.atomic
def approve_access_request(
    *,
    request_id: UUID,
    reviewer: User,
    admin_response: str = ''
) -> AccessRequest:
    """
    Approve a pending request and give the requester a member slot.

    Preconditions are checked in order: request exists, reviewer owns the
    subscription, request is pending, subscription has a free slot.

    Raises:
        AccessRequestNotFoundError: If the request doesn't exist
        InsufficientPermissionsError: If reviewer is not the subscription owner
        RequestAlreadyProcessedError: If the request is not pending
        SubscriptionFullError: If the subscription has no free slot
        AlreadyMemberError: If the requester joined by another route meanwhile
    """
    access_request = _lock_request(request_id)
    subscription = subscription_services.lock_subscription(access_request.subscription_id)

    if not subscription.is_owner(reviewer):
        raise InsufficientPermissionsError("Only the subscription owner can approve requests")

    if not access_request.is_pending:
        raise RequestAlreadyProcessedError("Request has already been processed")

    if subscription.current_members >= subscription.max_members:
        raise SubscriptionFullError("Subscription is full")

    try:
        subscription_services.admit_member(subscription=subscription, user=access_request.user)
    except subscription_services.AlreadyMemberError:
        raise AlreadyMemberError("User is already a member")
    except subscription_services.SubscriptionFullError:
        raise SubscriptionFullError("Subscription is full")

    _stamp(access_request, AccessRequestStatus.APPROVED, reviewer, admin_response)

    create_notification(
        user=access_request.user,
        title='Access request approved',
        message=f"Your request to join {subscription.name} was approved.",
        type=NotificationType.ACCESS_REQUEST_APPROVED,
        subscription=subscription,
        related_entity_id=access_request.id,
        related_entity_type='access_request',
        action_url=f"/subscriptions/{subscription.id}",
        action_text='View subscription',
    )

    logger.info("Access request %s approved by %s", access_request.id, reviewer.id)
    return access_request


@transaction.atomic
def reject_access_request(
    *,
    request_id: UUID,
    reviewer: User,
    admin_response: str = ''
) -> AccessRequest:
    """
    Reject a pending request.

    Raises:
        AccessRequestNotFoundError: If the request doesn't exist
        InsufficientPermissionsError: If reviewer is not the subscription owner
        RequestAlreadyProcessedError: If the request is not pending
    """
    access_request = _lock_request(request_id)
    subscription = access_request.subscription

    if not subscription.is_owner(reviewer):
        raise InsufficientPermissionsError("Only the subscription owner can reject requests")

    if not access_request.is_pending:
        raise RequestAlreadyProcessedError("Request has already been processed")

    _stamp(access_request, AccessRequestStatus.REJECTED, reviewer, admin_response)

    message = f"Your request to join {subscription.name} was rejected."
    if admin_response:
        message = f"{message} {admin_response}"

    create_notification(
        user=access_request.user,
        title='Access request rejected',
        message=message,
        type=NotificationType.ACCESS_REQUEST_REJECTED,
        subscription=subscription,
        related_entity_id=access_request.id,
        related_entity_type='access_request',
    )

    logger.info("Access request %s rejected by %s", access_request.id, reviewer.id)
    return access_request
