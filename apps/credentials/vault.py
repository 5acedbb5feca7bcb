"""
Secrets vault client.

Talks to a Bitwarden-style REST API using OAuth client credentials. The
vault is the only place secret values live; this module hands them back to
the caller and never logs them.
"""

import logging
import secrets
import string
import threading
import time
from dataclasses import dataclass
from typing import Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

# Refresh the vault token this long before it actually expires
TOKEN_EXPIRY_MARGIN = 300
DEFAULT_TOKEN_LIFETIME = 3600
LOGIN_CIPHER_TYPE = 1

SYMBOLS = '!@#$%^&*()_+-=[]{}|;:,.<>?'


class VaultError(Exception):
    """Raised when the vault cannot be reached or rejects a call."""
    pass


@dataclass
class VaultCredential:
    name: str
    username: str
    password: str
    uri: str = ''
    notes: str = ''
    id: Optional[str] = None


def generate_password_locally(length: int = 16) -> str:
    """Random password with at least one upper, lower, digit and symbol."""
    if length < 4:
        raise ValueError("Password length must be at least 4")

    pools = [string.ascii_uppercase, string.ascii_lowercase, string.digits, SYMBOLS]
    alphabet = ''.join(pools)

    chars = [secrets.choice(pool) for pool in pools]
    chars += [secrets.choice(alphabet) for _ in range(length - len(pools))]
    secrets.SystemRandom().shuffle(chars)
    return ''.join(chars)


class VaultClient:
    """
    Synchronous vault API client.

    One instance per process; it keeps an ``httpx.Client`` connection pool
    and the vault access token, and holds no domain state.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.client_id = client_id if client_id is not None else settings.VAULT_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.VAULT_CLIENT_SECRET
        self._http = httpx.Client(
            base_url=base_url or settings.VAULT_API_URL,
            timeout=timeout or settings.VAULT_TIMEOUT,
            transport=transport,
        )
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._token_lock = threading.Lock()

    def close(self):
        self._http.close()

    def _get_access_token(self) -> str:
        with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            try:
                response = self._http.post(
                    '/identity/connect/token',
                    data={
                        'grant_type': 'client_credentials',
                        'scope': 'api',
                        'client_id': self.client_id,
                        'client_secret': self.client_secret,
                    },
                )
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Vault authentication failed: %s", e.__class__.__name__)
                raise VaultError("Vault authentication failed") from e

            token = payload.get('access_token') if isinstance(payload, dict) else None
            if not token:
                logger.error("Vault authentication failed: no access token in response")
                raise VaultError("Vault authentication failed")

            lifetime = payload.get('expires_in') or DEFAULT_TOKEN_LIFETIME
            self._token = token
            self._token_expires_at = time.monotonic() + lifetime - TOKEN_EXPIRY_MARGIN
            return self._token

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> httpx.Response:
        token = self._get_access_token()
        try:
            response = self._http.request(
                method,
                path,
                json=json,
                headers={'Authorization': f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Vault %s %s returned %s", method, path, e.response.status_code)
            raise VaultError(f"Vault API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Vault %s %s failed: %s", method, path, e.__class__.__name__)
            raise VaultError("Vault unreachable") from e
        return response

    @staticmethod
    def _cipher_payload(credential: VaultCredential) -> dict:
        return {
            'type': LOGIN_CIPHER_TYPE,
            'name': credential.name,
            'notes': credential.notes or None,
            'login': {
                'username': credential.username,
                'password': credential.password,
                'uris': [{'uri': credential.uri}] if credential.uri else [],
            },
        }

    def create_credential(self, credential: VaultCredential) -> str:
        """Store a login and return its vault identifier."""
        result = self._request('POST', '/api/ciphers', json=self._cipher_payload(credential)).json()
        credential_id = result.get('Id') or result.get('id')
        if not credential_id:
            raise VaultError("Vault did not return a credential id")
        return credential_id

    def get_credential(self, credential_id: str) -> Optional[VaultCredential]:
        """Fetch a login, or None if the vault no longer has it."""
        try:
            result = self._request('GET', f'/api/ciphers/{credential_id}').json()
        except VaultError as e:
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404:
                return None
            raise

        if result.get('Type') != LOGIN_CIPHER_TYPE:
            raise VaultError("Invalid credential type")

        login = result.get('Login') or {}
        uris = login.get('Uris') or []
        return VaultCredential(
            id=result.get('Id'),
            name=result.get('Name', ''),
            username=login.get('Username', ''),
            password=login.get('Password', ''),
            uri=uris[0].get('Uri', '') if uris else '',
            notes=result.get('Notes') or '',
        )

    def update_credential(self, credential_id: str, **changes) -> VaultCredential:
        """
        Merge ``changes`` into the stored login.

        Accepts ``name``, ``username``, ``password``, ``uri`` and ``notes``;
        omitted or empty values keep what the vault has.
        """
        existing = self.get_credential(credential_id)
        if existing is None:
            raise VaultError("Credential not found")

        for field in ('name', 'username', 'password', 'uri', 'notes'):
            value = changes.get(field)
            if value:
                setattr(existing, field, value)

        self._request('PUT', f'/api/ciphers/{credential_id}', json=self._cipher_payload(existing))
        return existing

    def delete_credential(self, credential_id: str) -> None:
        self._request('DELETE', f'/api/ciphers/{credential_id}')

    def generate_password(self, length: int = 16) -> str:
        """Ask the vault for a password; generate one locally if it is down."""
        try:
            result = self._request('POST', '/api/tools/password', json={
                'length': length,
                'uppercase': True,
                'lowercase': True,
                'numbers': True,
                'special': True,
                'minUppercase': 1,
                'minLowercase': 1,
                'minNumbers': 1,
                'minSpecial': 1,
            }).json()
            password = result.get('data')
        except (VaultError, ValueError):
            password = None

        if not password:
            logger.warning("Vault password generator unavailable, generating locally")
            return generate_password_locally(length)
        return password


_client: Optional[VaultClient] = None
_client_lock = threading.Lock()


def get_vault_client() -> VaultClient:
    """Process-wide vault client, created on first use."""
    global _client
    with _client_lock:
        if _client is None:
            _client = VaultClient()
        return _client
