"""
Domain-specific exceptions for access requests.

Caught in views and converted to HTTP responses.
"""


class AccessRequestsServiceError(Exception):
    """Base exception for access request services."""
    pass


class AccessRequestNotFoundError(AccessRequestsServiceError):
    """Raised when an access request does not exist."""
    pass


class SubscriptionNotFoundError(AccessRequestsServiceError):
    """Raised when the target subscription is missing, private or inactive."""
    pass


class InsufficientPermissionsError(AccessRequestsServiceError):
    """Raised when someone other than the owner reviews a request."""
    pass


class RequestAlreadyProcessedError(AccessRequestsServiceError):
    """Raised when approving or rejecting a request that is no longer pending."""
    pass


class PendingRequestExistsError(AccessRequestsServiceError):
    """Raised when the user already has a pending request for the subscription."""
    pass


class AlreadyMemberError(AccessRequestsServiceError):
    """Raised when the requester already holds a slot."""
    pass


class SubscriptionFullError(AccessRequestsServiceError):
    """Raised when the subscription has no free slot."""
    pass
