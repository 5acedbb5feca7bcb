"""
Subscription management service.

Creation, member-scoped lookups, owner updates and deactivation.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import OuterRef, Q, QuerySet, Subquery

from apps.accounts.models import User
from apps.groups.models import Group, MemberRole
from apps.subscriptions.models import Subscription, SubscriptionMember

from .exceptions import (
    SubscriptionNotFoundError,
    GroupNotFoundError,
    InvalidCapacityError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'name',
    'service_name',
    'description',
    'total_price',
    'currency',
    'max_members',
    'is_public',
    'renewal_date',
)


@transaction.atomic
def create_subscription(
    *,
    owner: User,
    name: str,
    service_name: str,
    total_price: Decimal,
    max_members: int,
    renewal_date: datetime,
    description: str = '',
    group_id: Optional[UUID] = None,
    currency: str = 'BRL',
    is_public: bool = False
) -> Subscription:
    """
    Create a subscription and make the creator its admin member.

    Raises:
        GroupNotFoundError: If group_id is given but doesn't exist
        InsufficientPermissionsError: If the creator doesn't own that group
    """
    group = None
    if group_id is not None:
        try:
            group = Group.objects.get(id=group_id)
        except Group.DoesNotExist:
            raise GroupNotFoundError("Group not found")

        if not group.is_owner(owner):
            raise InsufficientPermissionsError("Only the group owner can add subscriptions to the group")

    subscription = Subscription.objects.create(
        owner=owner,
        group=group,
        name=name,
        service_name=service_name,
        description=description,
        total_price=total_price,
        currency=currency,
        max_members=max_members,
        current_members=1,
        is_public=is_public,
        renewal_date=renewal_date,
    )

    SubscriptionMember.objects.create(
        subscription=subscription,
        user=owner,
        role=MemberRole.ADMIN,
    )

    logger.info("Subscription %s created by user %s", subscription.id, owner.id)
    return subscription


def get_user_subscriptions(*, user: User) -> QuerySet[Subscription]:
    """
    Subscriptions the user owns or holds a slot in, annotated with ``user_role``.
    """
    role_subquery = SubscriptionMember.objects.filter(
        subscription=OuterRef('pk'),
        user=user
    ).values('role')[:1]

    member_of = SubscriptionMember.objects.filter(user=user).values('subscription_id')

    return (
        Subscription.objects
        .filter(Q(owner=user) | Q(id__in=member_of))
        .select_related('group', 'owner')
        .annotate(user_role=Subquery(role_subquery))
        .order_by('-created_at')
    )


def get_subscription_for_member(*, subscription_id: UUID, user: User) -> Subscription:
    """
    Get a subscription the user owns or belongs to.

    Raises:
        SubscriptionNotFoundError: If missing or the user has no access
    """
    try:
        subscription = (
            Subscription.objects
            .select_related('group', 'owner')
            .get(id=subscription_id)
        )
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found")

    if not (subscription.is_owner(user) or subscription.has_member(user)):
        raise SubscriptionNotFoundError("Subscription not found")

    return subscription


def _lock_owned_subscription(subscription_id: UUID, user: User) -> Subscription:
    try:
        subscription = (
            Subscription.objects
            .select_for_update()
            .get(id=subscription_id)
        )
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found")

    if not subscription.is_owner(user):
        raise InsufficientPermissionsError("Only the subscription owner can modify it")

    return subscription


@transaction.atomic
def update_subscription(*, subscription_id: UUID, user: User, **changes) -> Subscription:
    """
    Partially update a subscription (owner only).

    Only keys in ``UPDATABLE_FIELDS`` are applied; others are ignored.

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not the owner
        InvalidCapacityError: If max_members would fall below current_members
    """
    subscription = _lock_owned_subscription(subscription_id, user)

    new_max = changes.get('max_members')
    if new_max is not None and new_max < subscription.current_members:
        raise InvalidCapacityError(
            f"max_members cannot be lower than the current member count ({subscription.current_members})"
        )

    update_fields = ['updated_at']
    for field in UPDATABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(subscription, field, changes[field])
            update_fields.append(field)

    subscription.save(update_fields=update_fields)
    return subscription


@transaction.atomic
def deactivate_subscription(*, subscription_id: UUID, user: User) -> Subscription:
    """
    Deactivate a subscription (owner only). Rows are kept for history.

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not the owner
    """
    subscription = _lock_owned_subscription(subscription_id, user)

    subscription.is_active = False
    subscription.is_public = False
    subscription.save(update_fields=['is_active', 'is_public', 'updated_at'])

    logger.info("Subscription %s deactivated by user %s", subscription.id, user.id)
    return subscription
