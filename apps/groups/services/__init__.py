"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    UserNotFoundError,
    InvalidInviteCodeError,
    GroupInactiveError,
    GroupFullError,
    AlreadyMemberError,
    NotMemberError,
    CannotChangeOwnerRoleError,
    CannotRemoveOwnerError,
    InsufficientPermissionsError,
)

from .group_management import (
    create_group,
    get_group_by_id,
    get_group_for_member,
    get_user_groups,
)

from .membership_management import (
    join_group,
    add_member,
    remove_member,
    update_member_role,
    get_group_members,
)

from .invite_management import (
    invite_user,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'UserNotFoundError',
    'InvalidInviteCodeError',
    'GroupInactiveError',
    'GroupFullError',
    'AlreadyMemberError',
    'NotMemberError',
    'CannotChangeOwnerRoleError',
    'CannotRemoveOwnerError',
    'InsufficientPermissionsError',

    # Group Management
    'create_group',
    'get_group_by_id',
    'get_group_for_member',
    'get_user_groups',

    # Membership Management
    'join_group',
    'add_member',
    'remove_member',
    'update_member_role',
    'get_group_members',

    # Invites
    'invite_user',
]
