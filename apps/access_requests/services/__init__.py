"""Access requests app services layer."""

from .exceptions import (
    AccessRequestsServiceError,
    AccessRequestNotFoundError,
    SubscriptionNotFoundError,
    InsufficientPermissionsError,
    RequestAlreadyProcessedError,
    PendingRequestExistsError,
    AlreadyMemberError,
    SubscriptionFullError,
)
from .request_management import (
    REQUEST_TYPES,
    create_access_request,
    list_access_requests,
)
from .request_review import (
    approve_access_request,
    reject_access_request,
)

__all__ = [
    # Exceptions
    'AccessRequestsServiceError',
    'AccessRequestNotFoundError',
    'SubscriptionNotFoundError',
    'InsufficientPermissionsError',
    'RequestAlreadyProcessedError',
    'PendingRequestExistsError',
    'AlreadyMemberError',
    'SubscriptionFullError',
    # Services
    'REQUEST_TYPES',
    'create_access_request',
    'list_access_requests',
    'approve_access_request',
    'reject_access_request',
]
