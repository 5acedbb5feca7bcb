"""
Membership management service.

Handles group membership operations with concurrency protection. Every
insert locks the group row first, so the capacity check and the insert
see the same member count.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMember, MemberRole
from apps.notifications.services import mark_group_invites_read

from .exceptions import (
    GroupNotFoundError,
    UserNotFoundError,
    InvalidInviteCodeError,
    GroupInactiveError,
    GroupFullError,
    AlreadyMemberError,
    NotMemberError,
    CannotRemoveOwnerError,
    CannotChangeOwnerRoleError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def _lock_group(group_id: UUID) -> Group:
    try:
        return (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def _insert_member(group: Group, user: User, role: str) -> GroupMember:
    """Capacity check and insert; caller holds the lock on ``group``."""
    if group.has_member(user):
        raise AlreadyMemberError("User is already a member")

    if group.is_full:
        raise GroupFullError("Group is full")

    try:
        with transaction.atomic():
            membership = GroupMember.objects.create(user=user, group=group, role=role)
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError("User is already a member")

    logger.info("User %s joined group %s as %s", user.id, group.id, role)
    return membership


@transaction.atomic
def join_group(
    *,
    group_id: UUID,
    user: User,
    invite_code: str
) -> GroupMember:
    """
    Join a group using an invite code.

    Raises:
        GroupNotFoundError: If group doesn't exist
        GroupInactiveError: If the group was deactivated
        InvalidInviteCodeError: If invite code is incorrect
        AlreadyMemberError: If user is already a member
        GroupFullError: If the group has no free slots
    """
    group = _lock_group(group_id)

    if not group.is_active:
        raise GroupInactiveError("Group is not active")

    if group.invite_code != invite_code:
        raise InvalidInviteCodeError("Invalid invite code")

    membership = _insert_member(group, user, MemberRole.MEMBER)
    mark_group_invites_read(user=user, group_id=group.id)
    return membership


@transaction.atomic
def add_member(
    *,
    group_id: UUID,
    user_id: UUID,
    added_by: User,
    role: str = MemberRole.MEMBER
) -> GroupMember:
    """
    Add an existing user to a group (owner or admin only).

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If added_by is not owner/admin
        UserNotFoundError: If the user doesn't exist
        AlreadyMemberError: If user is already a member
        GroupFullError: If the group has no free slots
    """
    group = _lock_group(group_id)

    if not group.is_admin(added_by):
        raise InsufficientPermissionsError("Only group owners and admins can add members")

    try:
        user = User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    return _insert_member(group, user, role)


@transaction.atomic
def remove_member(
    *,
    group_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a member from a group.

    The owner may remove anyone but themselves, an admin may remove
    ordinary members, and every member may remove themselves.

    Raises:
        GroupNotFoundError: If group doesn't exist
        CannotRemoveOwnerError: If trying to remove the owner
        InsufficientPermissionsError: If removed_by lacks rights over the target
        NotMemberError: If target user is not a member
    """
    group = _lock_group(group_id)

    if str(group.owner_id) == str(user_id):
        raise CannotRemoveOwnerError("Cannot remove the group owner")

    try:
        membership = GroupMember.objects.get(group=group, user_id=user_id)
    except GroupMember.DoesNotExist:
        if not group.is_admin(removed_by):
            raise InsufficientPermissionsError("Insufficient permissions")
        raise NotMemberError("User is not a member of this group")

    is_self = str(removed_by.id) == str(user_id)
    if not is_self and not group.is_owner(removed_by):
        remover_role = group.get_user_role(removed_by)
        if remover_role != MemberRole.ADMIN or membership.role == MemberRole.ADMIN:
            raise InsufficientPermissionsError("Insufficient permissions")

    membership.delete()
    logger.info("User %s removed from group %s by %s", user_id, group.id, removed_by.id)


@transaction.atomic
def update_member_role(
    *,
    group_id: UUID,
    user_id: UUID,
    new_role: str,
    updated_by: User
) -> GroupMember:
    """
    Promote a member to admin or demote them back (owner or admin only).

    Takes the same group lock as joins and removals so a member cannot be
    removed and re-roled at once. The owner's role is fixed.

    Raises:
        ValueError: If new_role is not a member role
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If updated_by is not owner/admin
        CannotChangeOwnerRoleError: If the target is the owner
        NotMemberError: If target user is not a member
    """
    if new_role not in MemberRole.values:
        raise ValueError(f"Invalid role. Must be one of: {MemberRole.values}")

    group = _lock_group(group_id)

    if not group.is_admin(updated_by):
        raise InsufficientPermissionsError("Only group owners and admins can update member roles")

    if str(group.owner_id) == str(user_id):
        raise CannotChangeOwnerRoleError("Cannot change the owner's role")

    updated = GroupMember.objects.filter(group=group, user_id=user_id).update(role=new_role)
    if not updated:
        raise NotMemberError("User is not a member of this group")

    logger.info("User %s is now %s in group %s", user_id, new_role, group.id)
    return GroupMember.objects.select_related('user').get(group=group, user_id=user_id)


def get_group_members(*, group_id: UUID, user: User) -> QuerySet[GroupMember]:
    """
    Get all members of a group (members only).

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not a member
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not (group.is_owner(user) or group.has_member(user)):
        raise InsufficientPermissionsError("Access denied")

    return (
        GroupMember.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('role', 'joined_at')
    )
