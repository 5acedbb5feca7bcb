"""
Bearer token codec.

Tokens are simplejwt access tokens signed with ``SIMPLE_JWT['SIGNING_KEY']``
and carrying ``user_id`` and ``email`` claims. Lifetime comes from
``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']`` (7 days).
"""

from typing import Dict

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from .services.exceptions import InvalidTokenError


def issue_token(user) -> str:
    """Return a signed access token for ``user``."""
    token = AccessToken.for_user(user)
    token['email'] = user.email
    return str(token)


def decode_token(raw_token: str) -> Dict[str, str]:
    """
    Verify signature and expiry and return the identity claims.

    Raises:
        InvalidTokenError: If the token is malformed, tampered with or expired
    """
    try:
        token = AccessToken(raw_token)
    except TokenError as e:
        raise InvalidTokenError(str(e))

    return {
        'user_id': str(token['user_id']),
        'email': token.get('email', ''),
    }
