"""
Domain-specific exceptions for subscriptions app.

Caught in views and converted to HTTP responses.
"""


class SubscriptionsServiceError(Exception):
    """Base exception for all subscriptions service errors."""
    pass


class SubscriptionNotFoundError(SubscriptionsServiceError):
    """Raised when a subscription does not exist or is inaccessible."""
    pass


class GroupNotFoundError(SubscriptionsServiceError):
    """Raised when the parent group of a new subscription does not exist."""
    pass


class UserNotFoundError(SubscriptionsServiceError):
    """Raised when the user to add does not exist."""
    pass


class SubscriptionFullError(SubscriptionsServiceError):
    """Raised when current_members has reached max_members."""
    pass


class InvalidCapacityError(SubscriptionsServiceError):
    """Raised when max_members would drop below current_members."""
    pass


class AlreadyMemberError(SubscriptionsServiceError):
    """Raised when the user already holds a slot."""
    pass


class NotMemberError(SubscriptionsServiceError):
    """Raised when the target user holds no slot."""
    pass


class CannotRemoveOwnerError(SubscriptionsServiceError):
    """Raised when attempting to remove the subscription owner."""
    pass


class CannotChangeOwnerRoleError(SubscriptionsServiceError):
    """Raised when attempting to change the owner's role."""
    pass


class InsufficientPermissionsError(SubscriptionsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass
