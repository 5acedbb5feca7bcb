"""
Credential storage service.

Secrets are kept in the external vault; the subscription row only holds the
opaque vault identifier and the time of the last password change.
"""

import logging
from typing import Tuple
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.credentials.vault import VaultCredential, VaultError, get_vault_client
from apps.notifications.models import NotificationType
from apps.notifications.services import notify_users
from apps.subscriptions.models import Subscription

from .exceptions import (
    SubscriptionNotFoundError,
    CredentialNotFoundError,
    InsufficientPermissionsError,
    CredentialStorageError,
)

logger = logging.getLogger(__name__)


def _get_subscription(subscription_id: UUID) -> Subscription:
    try:
        return Subscription.objects.get(id=subscription_id)
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError("Subscription not found")


def _require_stored(subscription: Subscription) -> str:
    if not subscription.credentials_id:
        raise CredentialNotFoundError("No credentials stored for this subscription")
    return subscription.credentials_id


def store_credential(
    *,
    subscription_id: UUID,
    user: User,
    username: str,
    password: str,
    name: str = '',
    uri: str = '',
    notes: str = ''
) -> Subscription:
    """
    Store the subscription's login in the vault (owner or admin).

    A previously stored identifier is replaced.

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not owner/admin
        CredentialStorageError: If the vault call fails
    """
    subscription = _get_subscription(subscription_id)

    if not subscription.is_admin(user):
        raise InsufficientPermissionsError("Only subscription owners and admins can store credentials")

    credential = VaultCredential(
        name=name or f"{subscription.service_name} - {subscription.name}",
        username=username,
        password=password,
        uri=uri,
        notes=notes,
    )
    try:
        credential_id = get_vault_client().create_credential(credential)
    except VaultError as e:
        raise CredentialStorageError("Failed to store credential securely") from e

    subscription.credentials_id = credential_id
    subscription.last_password_change = timezone.now()
    subscription.save(update_fields=['credentials_id', 'last_password_change', 'updated_at'])

    logger.info("Credential stored for subscription %s by %s", subscription.id, user.id)
    return subscription


def get_credential(*, subscription_id: UUID, user: User) -> Tuple[Subscription, VaultCredential]:
    """
    Read the stored login (owner or any member).

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not owner/member
        CredentialNotFoundError: If nothing is stored or the vault lost it
        CredentialStorageError: If the vault call fails
    """
    subscription = _get_subscription(subscription_id)

    if not (subscription.is_owner(user) or subscription.has_member(user)):
        raise InsufficientPermissionsError("Access denied")

    credential_id = _require_stored(subscription)
    try:
        credential = get_vault_client().get_credential(credential_id)
    except VaultError as e:
        raise CredentialStorageError("Failed to retrieve credential") from e

    if credential is None:
        raise CredentialNotFoundError("Credential not found in secure storage")

    logger.info("Credential for subscription %s read by %s", subscription.id, user.id)
    return subscription, credential


def update_credential(*, subscription_id: UUID, user: User, **changes) -> Tuple[Subscription, bool]:
    """
    Update the stored login (owner or admin).

    A password change stamps ``last_password_change`` and notifies every
    member of the subscription.

    Returns:
        (subscription, password_changed)

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not owner/admin
        CredentialNotFoundError: If nothing is stored
        CredentialStorageError: If the vault call fails
    """
    subscription = _get_subscription(subscription_id)

    if not subscription.is_admin(user):
        raise InsufficientPermissionsError("Only subscription owners and admins can update credentials")

    credential_id = _require_stored(subscription)
    try:
        get_vault_client().update_credential(credential_id, **changes)
    except VaultError as e:
        raise CredentialStorageError("Failed to update credential") from e

    password_changed = bool(changes.get('password'))
    if password_changed:
        subscription.last_password_change = timezone.now()
        subscription.save(update_fields=['last_password_change', 'updated_at'])

        members = User.objects.filter(subscription_memberships__subscription=subscription)
        notify_users(
            users=members,
            title=f"Password updated - {subscription.name}",
            message='The subscription password was updated. Open the credentials to get the new one.',
            type=NotificationType.PASSWORD_UPDATED,
            subscription=subscription,
            related_entity_id=subscription.id,
            related_entity_type='subscription',
            action_url=f"/subscriptions/{subscription.id}/credentials",
            action_text='View credentials',
        )

    logger.info("Credential for subscription %s updated by %s", subscription.id, user.id)
    return subscription, password_changed


def delete_credential(*, subscription_id: UUID, user: User) -> Subscription:
    """
    Delete the stored login (owner only).

    Raises:
        SubscriptionNotFoundError: If subscription doesn't exist
        InsufficientPermissionsError: If user is not the owner
        CredentialNotFoundError: If nothing is stored
        CredentialStorageError: If the vault call fails
    """
    subscription = _get_subscription(subscription_id)

    if not subscription.is_owner(user):
        raise InsufficientPermissionsError("Only the subscription owner can delete credentials")

    credential_id = _require_stored(subscription)
    try:
        get_vault_client().delete_credential(credential_id)
    except VaultError as e:
        raise CredentialStorageError("Failed to delete credential") from e

    subscription.credentials_id = ''
    subscription.last_password_change = None
    subscription.save(update_fields=['credentials_id', 'last_password_change', 'updated_at'])

    logger.info("Credential for subscription %s deleted by %s", subscription.id, user.id)
    return subscription


def generate_password(*, length: int = 16) -> str:
    """Strong password from the vault, or generated locally when it is down."""
    return get_vault_client().generate_password(length)
