import pytest
from datetime import timedelta
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken
from apps.accounts.models import User


# =============================================================================
# Signup Tests
# =============================================================================

@pytest.mark.django_db
class TestSignup:
    """Tests for POST /api/auth/signup/"""

    def test_signup_success(self, api_client):
        """Successfully register a new user and receive a token."""
        url = reverse('users:signup')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'name': 'New User',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['email'] == 'newuser@example.com'
        assert response.data['user']['name'] == 'New User'
        assert 'password' not in response.data['user']
        assert response.data['token']
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_signup_without_name(self, api_client):
        """Name is optional."""
        url = reverse('users:signup')
        response = api_client.post(url, {'email': 'minimal@example.com', 'password': 'SecurePass123!'})

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='minimal@example.com').name == ''

    def test_signup_duplicate_email(self, api_client, user):
        """Cannot register twice with the same email, whatever the case."""
        url = reverse('users:signup')
        data = {'email': user.email.upper(), 'password': 'SecurePass123!'}
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'User with this email already exists'

    def test_signup_short_password(self, api_client):
        """Passwords shorter than 8 characters are rejected."""
        url = reverse('users:signup')
        response = api_client.post(url, {'email': 'short@example.com', 'password': 'abc'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid input'
        assert 'password' in response.data['details']

    def test_signup_invalid_email(self, api_client):
        url = reverse('users:signup')
        response = api_client.post(url, {'email': 'not-an-email', 'password': 'SecurePass123!'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data['details']

    def test_signup_password_is_hashed(self, api_client):
        url = reverse('users:signup')
        api_client.post(url, {'email': 'hash@example.com', 'password': 'SecurePass123!'})

        user = User.objects.get(email='hash@example.com')
        assert user.password != 'SecurePass123!'
        assert user.check_password('SecurePass123!')


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        data = {'email': 'testuser@example.com', 'password': 'TestPass123!'}
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['id'] == str(user.id)
        assert response.data['token']

    def test_login_is_case_insensitive_on_email(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'TestUser@Example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPassword!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid email or password'

    def test_login_nonexistent_user(self, api_client):
        """Unknown emails get the same answer as wrong passwords."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'nobody@example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid email or password'

    def test_login_inactive_user(self, api_client, user):
        user.is_active = False
        user.save()

        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_updates_last_login(self, api_client, user):
        """Login stamps last_login."""
        assert user.last_login is None

        url = reverse('users:login')
        api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_token_opens_session(self, api_client, user):
        """The token returned by login authenticates later requests."""
        response = api_client.post(
            reverse('users:login'),
            {'email': user.email, 'password': 'TestPass123!'},
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")

        session = api_client.get(reverse('users:session'))
        assert session.status_code == status.HTTP_200_OK
        assert session.data['user']['email'] == user.email


# =============================================================================
# Session / Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestSession:
    """Tests for GET /api/auth/session/"""

    def test_get_session(self, authenticated_client, user):
        url = reverse('users:session')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['id'] == str(user.id)
        assert response.data['user']['email'] == user.email

    def test_session_without_header(self, api_client):
        """Missing header is answered with 401."""
        url = reverse('users:session')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'error': 'Missing or invalid authorization header'}

    def test_session_with_garbage_token(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = api_client.get(reverse('users:session'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'error': 'Invalid or expired token'}

    def test_session_with_expired_token(self, api_client, user):
        token = AccessToken.for_user(user)
        token.set_exp(lifetime=-timedelta(minutes=1))
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('users:session'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid or expired token'

    def test_session_with_wrong_scheme(self, api_client, user):
        """Non-Bearer schemes are treated as anonymous."""
        api_client.credentials(HTTP_AUTHORIZATION='Basic dXNlcjpwYXNz')
        response = api_client.get(reverse('users:session'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_session_for_deleted_user(self, authenticated_client, user):
        """A valid token for a user that no longer exists is rejected."""
        user.delete()
        response = authenticated_client.get(reverse('users:session'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_success(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Logout successful'

    def test_logout_unauthenticated(self, api_client):
        url = reverse('users:logout')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Model Tests
# =============================================================================

@pytest.mark.django_db
class TestUserModel:
    """Tests for User model."""

    def test_create_user(self):
        user = User.objects.create_user(email='Test@EXAMPLE.com', password='TestPass123!')

        assert user.email == 'Test@example.com'
        assert user.check_password('TestPass123!')
        assert user.is_active is True
        assert user.is_staff is False

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email='', password='TestPass123!')

    def test_create_superuser(self):
        admin = User.objects.create_superuser(email='admin@example.com', password='AdminPass123!')

        assert admin.is_staff is True
        assert admin.is_superuser is True

    def test_get_display_name(self, user):
        assert user.get_display_name() == 'Test User'
        user.name = ''
        assert user.get_display_name() == 'testuser'

    def test_user_str(self, user):
        assert str(user) == 'testuser@example.com'
