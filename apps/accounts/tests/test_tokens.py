"""Unit tests for the bearer token codec and the API error envelope."""

import pytest
from datetime import timedelta
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.services import InvalidTokenError
from apps.accounts.tokens import issue_token, decode_token


@pytest.mark.django_db
class TestTokenCodec:

    def test_issue_and_decode(self, user):
        claims = decode_token(issue_token(user))

        assert claims == {'user_id': str(user.id), 'email': user.email}

    def test_tampered_token_rejected(self, user):
        token = issue_token(user)
        header, payload, signature = token.split('.')
        tampered = '.'.join([header, payload, signature[::-1]])

        with pytest.raises(InvalidTokenError):
            decode_token(tampered)

    def test_expired_token_rejected(self, user):
        token = AccessToken.for_user(user)
        token.set_exp(lifetime=-timedelta(seconds=1))

        with pytest.raises(InvalidTokenError):
            decode_token(str(token))

    def test_malformed_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            decode_token('abc.def')

    def test_token_lifetime_is_seven_days(self, user):
        token = AccessToken(issue_token(user))

        assert token['exp'] - token['iat'] == int(timedelta(days=7).total_seconds())


@pytest.mark.django_db
class TestErrorEnvelope:
    """Errors raised by DRF itself use the {'error', 'details'?} shape."""

    def test_validation_error_shape(self, api_client):
        response = api_client.post(reverse('users:login'), {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid input'
        assert set(response.data['details']) == {'email', 'password'}

    def test_method_not_allowed_shape(self, api_client):
        response = api_client.get(reverse('users:login'))

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert 'error' in response.data

    def test_health_check(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'ok'
