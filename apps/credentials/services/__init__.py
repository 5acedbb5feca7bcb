"""Credentials app services layer."""

from .exceptions import (
    CredentialsServiceError,
    SubscriptionNotFoundError,
    CredentialNotFoundError,
    InsufficientPermissionsError,
    CredentialStorageError,
)
from .credential_management import (
    store_credential,
    get_credential,
    update_credential,
    delete_credential,
    generate_password,
)

__all__ = [
    # Exceptions
    'CredentialsServiceError',
    'SubscriptionNotFoundError',
    'CredentialNotFoundError',
    'InsufficientPermissionsError',
    'CredentialStorageError',
    # Services
    'store_credential',
    'get_credential',
    'update_credential',
    'delete_credential',
    'generate_password',
]
