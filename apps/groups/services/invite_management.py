"""
Invite management service.

Inviting by email does not create a membership; it leaves a
``group_invite`` notification whose action URL carries the invite code.
The invitee then joins through :func:`join_group`.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.groups.models import Group, MemberRole
from apps.notifications.models import Notification, NotificationType
from apps.notifications.services import create_notification

from .exceptions import (
    GroupNotFoundError,
    UserNotFoundError,
    GroupFullError,
    AlreadyMemberError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def invite_user(
    *,
    group_id: UUID,
    email: str,
    invited_by: User,
    role: str = MemberRole.MEMBER,
    message: Optional[str] = None
) -> Notification:
    """
    Invite a registered user to a group (owner or admin only).

    Args:
        group_id: UUID of the group
        email: Email of the user to invite
        invited_by: User sending the invite
        role: Role suggested in the invitation
        message: Optional personal note appended to the notification

    Returns:
        The invite Notification created for the invitee

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If invited_by is not owner/admin
        GroupFullError: If the group has no free slots
        UserNotFoundError: If no user has that email
        AlreadyMemberError: If the invitee is already a member
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(invited_by):
        raise InsufficientPermissionsError("Only group owners and admins can invite members")

    if group.is_full:
        raise GroupFullError("Group is full")

    try:
        invitee = User.objects.get(email__iexact=email, is_active=True)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    if group.has_member(invitee):
        raise AlreadyMemberError("User is already a member")

    text = f"{invited_by.get_display_name()} invited you to join \"{group.name}\" as {role}."
    if message:
        text = f"{text} {message}"

    notification = create_notification(
        user=invitee,
        title=f"Invitation to {group.name}",
        message=text,
        type=NotificationType.GROUP_INVITE,
        related_entity_id=group.id,
        related_entity_type='group',
        action_url=f"/groups/join?groupId={group.id}&code={group.invite_code}",
        action_text='Join group',
    )

    logger.info("User %s invited %s to group %s", invited_by.id, invitee.id, group.id)
    return notification
