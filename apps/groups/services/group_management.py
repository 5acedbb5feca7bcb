"""
Group management service.

Handles group creation and member-scoped lookups with proper transaction safety.
"""

import logging
import secrets
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import OuterRef, Prefetch, QuerySet, Subquery, Count

from apps.accounts.models import User
from apps.groups.models import Group, GroupMember, MemberRole

from .exceptions import GroupNotFoundError

logger = logging.getLogger(__name__)


def create_group(
    *,
    name: str,
    owner: User,
    description: str = '',
    max_members: int = 10,
    max_retries: int = 5
) -> Group:
    """
    Create a new group and add the creator as an admin member.

    This is a multi-step operation wrapped in a transaction:
    1. Generate unique invite code
    2. Create the group
    3. Create the creator's admin membership

    Args:
        name: Group name
        owner: User who will own the group
        description: Optional group description
        max_members: Capacity of the group (2..50)
        max_retries: Maximum attempts to generate unique invite code

    Returns:
        Created Group instance

    Raises:
        RuntimeError: If cannot generate unique invite code after retries
    """
    # Retry logic outside transaction to handle invite code collisions
    for attempt in range(max_retries):
        invite_code = secrets.token_urlsafe(12)[:16]

        try:
            with transaction.atomic():
                group = Group.objects.create(
                    name=name,
                    owner=owner,
                    description=description,
                    max_members=max_members,
                    invite_code=invite_code
                )

                GroupMember.objects.create(
                    user=owner,
                    group=group,
                    role=MemberRole.ADMIN
                )

                logger.info("Group %s created by user %s", group.id, owner.id)
                return group

        except IntegrityError:
            # Invite code collision (very rare)
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    raise RuntimeError("Unexpected error in group creation")


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its members preloaded.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('owner')
            .prefetch_related(
                Prefetch(
                    'members',
                    queryset=GroupMember.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def get_group_for_member(*, group_id: UUID, user: User) -> Group:
    """
    Get a group the user owns or belongs to.

    Non-members get the same error as a missing group so that group IDs
    cannot be probed.

    Raises:
        GroupNotFoundError: If group doesn't exist or user has no access
    """
    group = get_group_by_id(group_id=group_id)
    if not (group.is_owner(user) or group.has_member(user)):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")
    return group


def get_user_groups(*, user: User) -> QuerySet[Group]:
    """
    Groups the user belongs to, annotated with ``user_role`` and ``members_total``.
    """
    role_subquery = GroupMember.objects.filter(
        group=OuterRef('pk'),
        user=user
    ).values('role')[:1]

    return (
        Group.objects
        .filter(id__in=GroupMember.objects.filter(user=user).values('group_id'))
        .select_related('owner')
        .annotate(
            user_role=Subquery(role_subquery),
            members_total=Count('members'),
        )
        .order_by('-created_at')
    )
