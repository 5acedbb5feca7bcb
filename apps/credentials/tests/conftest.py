import pytest
from unittest.mock import Mock, patch

from apps.credentials.vault import VaultClient, VaultCredential


@pytest.fixture
def vault():
    """Replace the process-wide vault client with a mock."""
    client = Mock(spec=VaultClient)
    client.create_credential.return_value = 'cipher-1'
    client.get_credential.return_value = VaultCredential(
        id='cipher-1',
        name='Netflix - Family Plan',
        username='family@example.com',
        password='S3cret!pass',
        uri='https://netflix.com',
        notes='Profile 3 is free',
    )
    client.generate_password.return_value = 'Gen3rated!Passw0rd'
    with patch(
        'apps.credentials.services.credential_management.get_vault_client',
        return_value=client,
    ):
        yield client


@pytest.fixture
def stored_subscription(subscription):
    """``subscription`` with a login already in the vault."""
    subscription.credentials_id = 'cipher-1'
    subscription.save(update_fields=['credentials_id'])
    return subscription
