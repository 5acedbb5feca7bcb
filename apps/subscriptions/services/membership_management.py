"""
Subscription membership service.

``current_members`` is a denormalized counter. Every change to the
membership rows happens with the subscription row locked and updates the
counter in the same transaction.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import MemberRole
from apps.subscriptions.models import Subscription, SubscriptionMember

from .exceptions import (
    SubscriptionNotFoundError,
    UserNotFoundError,
    SubscriptionFullError,
    AlreadyMemberError,
    NotMemberError,
    CannotRemoveOwnerError,
    CannotChangeOwnerRoleError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def lock_subscription(subscription_id: UUID) -> Subscription:
    """Fetch the subscription row with ``SELECT ... FOR UPDATE``."""
    try:
        return (
            Subscription.objects
            .select_for_update()
            .get(id=subscription_id)
        )
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found")


def admit_member(
    *,
    subscription: Subscription,
    user: User,
    role: str = MemberRole.MEMBER
) -> SubscriptionMember:
    """
    Insert a member and bump ``current_members``.

    The caller must run inside a transaction holding the lock returned by
    :func:`lock_subscription`.

    Raises:
        AlreadyMemberError: If the user already holds a slot
        SubscriptionFullError: If no slot is free
    """
    if subscription.has_member(user):
        raise AlreadyMemberError("User is already a member")

    if subscription.current_members >= subscription.max_members:
        raise SubscriptionFullError("Subscription is full")

    try:
        with transaction.atomic():
            membership = SubscriptionMember.objects.create(
                subscription=subscription,
                user=user,
                role=role,
            )
    except IntegrityError:
        raise AlreadyMemberError("User is already a member")

    subscription.current_members += 1
    subscription.save(update_fields=['current_members', 'updated_at'])

    logger.info("User %s joined subscription %s as %s", user.id, subscription.id, role)
    return membership


@transaction.atomic
def add_member(
    *,
    subscription_id: UUID,
    user_id: UUID,
    added_by: User,
    role: str = MemberRole.MEMBER
) -> SubscriptionMember:
    """
    Add an existing user to a subscription (owner or admin only).

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If added_by is not owner/admin
        UserNotFoundError: If the user doesn't exist
        AlreadyMemberError: If user is already a member
        SubscriptionFullError: If no slot is free
    """
    subscription = lock_subscription(subscription_id)

    if not subscription.is_admin(added_by):
        raise InsufficientPermissionsError("Only subscription owners and admins can add members")

    try:
        user = User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    return admit_member(subscription=subscription, user=user, role=role)


@transaction.atomic
def remove_member(
    *,
    subscription_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a member and decrement ``current_members``.

    Same tiers as groups: owner removes anyone but themselves, admins
    remove ordinary members, members remove themselves.

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        CannotRemoveOwnerError: If trying to remove the owner
        InsufficientPermissionsError: If removed_by lacks rights over the target
        NotMemberError: If target user is not a member
    """
    subscription = lock_subscription(subscription_id)

    if str(subscription.owner_id) == str(user_id):
        raise CannotRemoveOwnerError("Cannot remove the subscription owner")

    try:
        membership = SubscriptionMember.objects.get(subscription=subscription, user_id=user_id)
    except SubscriptionMember.DoesNotExist:
        if not subscription.is_admin(removed_by):
            raise InsufficientPermissionsError("Insufficient permissions")
        raise NotMemberError("User is not a member of this subscription")

    is_self = str(removed_by.id) == str(user_id)
    if not is_self and not subscription.is_owner(removed_by):
        remover_role = subscription.get_user_role(removed_by)
        if remover_role != MemberRole.ADMIN or membership.role == MemberRole.ADMIN:
            raise InsufficientPermissionsError("Insufficient permissions")

    membership.delete()
    subscription.current_members = max(subscription.current_members - 1, 0)
    subscription.save(update_fields=['current_members', 'updated_at'])

    logger.info("User %s removed from subscription %s by %s", user_id, subscription.id, removed_by.id)


@transaction.atomic
def update_member_role(
    *,
    subscription_id: UUID,
    user_id: UUID,
    new_role: str,
    updated_by: User
) -> SubscriptionMember:
    """
    Update a member's role (owner or admin only).

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If updated_by is not owner/admin
        CannotChangeOwnerRoleError: If trying to change owner's role
        NotMemberError: If target user is not a member
        ValueError: If new_role is invalid
    """
    if new_role not in MemberRole.values:
        raise ValueError(f"Invalid role. Must be one of: {MemberRole.values}")

    try:
        subscription = Subscription.objects.get(id=subscription_id)
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found")

    if not subscription.is_admin(updated_by):
        raise InsufficientPermissionsError("Only subscription owners and admins can update member roles")

    if str(subscription.owner_id) == str(user_id):
        raise CannotChangeOwnerRoleError("Cannot change the owner's role")

    try:
        membership = (
            SubscriptionMember.objects
            .select_for_update()
            .get(subscription=subscription, user_id=user_id)
        )
    except SubscriptionMember.DoesNotExist:
        raise NotMemberError("User is not a member of this subscription")

    membership.role = new_role
    membership.save(update_fields=['role'])
    return membership


def get_subscription_members(*, subscription_id: UUID, user: User) -> QuerySet[SubscriptionMember]:
    """
    Members of a subscription (visible to members only).

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not a member
    """
    try:
        subscription = Subscription.objects.get(id=subscription_id)
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found")

    if not (subscription.is_owner(user) or subscription.has_member(user)):
        raise InsufficientPermissionsError("Access denied")

    return (
        SubscriptionMember.objects
        .filter(subscription=subscription)
        .select_related('user')
        .order_by('role', 'joined_at')
    )
