"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class UserNotFoundError(GroupsServiceError):
    """Raised when the user to invite or add does not exist."""
    pass


class InvalidInviteCodeError(GroupsServiceError):
    """Raised when an invite code is incorrect."""
    pass


class GroupInactiveError(GroupsServiceError):
    """Raised when joining a deactivated group."""
    pass


class GroupFullError(GroupsServiceError):
    """Raised when a group has reached max_members."""
    pass


class AlreadyMemberError(GroupsServiceError):
    """Raised when a user tries to join a group they're already in."""
    pass


class NotMemberError(GroupsServiceError):
    """Raised when the target user is not a member of the group."""
    pass


class CannotChangeOwnerRoleError(GroupsServiceError):
    """Raised when attempting to change the owner's role."""
    pass


class CannotRemoveOwnerError(GroupsServiceError):
    """Raised when attempting to remove the group owner."""
    pass


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass
