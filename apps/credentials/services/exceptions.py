"""
Domain-specific exceptions for credential storage.

Caught in views and converted to HTTP responses.
"""


class CredentialsServiceError(Exception):
    """Base exception for credential services."""
    pass


class SubscriptionNotFoundError(CredentialsServiceError):
    """Raised when the subscription does not exist."""
    pass


class CredentialNotFoundError(CredentialsServiceError):
    """Raised when no credential is stored, or the vault lost it."""
    pass


class InsufficientPermissionsError(CredentialsServiceError):
    """Raised when the user's role does not allow the operation."""
    pass


class CredentialStorageError(CredentialsServiceError):
    """Raised when the vault is unreachable or rejects the call."""
    pass
