import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.accounts.tokens import issue_token
from apps.groups.models import MemberRole
from apps.subscriptions.models import Subscription, SubscriptionMember


def client_for(user):
    """Return a fresh API client carrying a bearer token for ``user``."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user)}')
    return client


def make_subscription(owner, members=(), **fields):
    """
    Create a subscription with the owner's admin slot and extra member slots.

    ``current_members`` is kept in step with the rows created here.
    """
    defaults = {
        'name': 'Family Plan',
        'service_name': 'Netflix',
        'total_price': Decimal('100.00'),
        'max_members': 4,
        'renewal_date': timezone.now() + timedelta(days=30),
    }
    defaults.update(fields)
    subscription = Subscription.objects.create(
        owner=owner,
        current_members=1 + len(members),
        **defaults
    )
    SubscriptionMember.objects.create(subscription=subscription, user=owner, role=MemberRole.ADMIN)
    for member in members:
        SubscriptionMember.objects.create(subscription=subscription, user=member, role=MemberRole.MEMBER)
    return subscription


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        name='Test User',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        name='Other User',
    )


@pytest.fixture
def member_user(db):
    """Create and return a user meant to hold an ordinary slot."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        name='Member User',
    )


@pytest.fixture
def authenticated_client(user):
    """Return an API client authenticated as ``user``."""
    return client_for(user)


@pytest.fixture
def other_client(other_user):
    return client_for(other_user)


@pytest.fixture
def member_client(member_user):
    return client_for(member_user)


@pytest.fixture
def subscription(user, member_user):
    """Subscription of 100.00 for up to 4 owned by ``user`` with one member."""
    return make_subscription(user, members=[member_user])


@pytest.fixture
def public_subscription(user):
    """Public subscription owned by ``user`` with free slots."""
    return make_subscription(
        user,
        name='Spotify Duo',
        service_name='Spotify',
        total_price=Decimal('30.00'),
        max_members=3,
        is_public=True,
    )


@pytest.fixture
def make_client():
    """Factory fixture: ``make_client(user)`` returns an authenticated client."""
    return client_for


@pytest.fixture
def subscription_factory(db):
    """Factory fixture wrapping :func:`make_subscription`."""
    return make_subscription


@pytest.fixture
def user_factory(db):
    """Factory fixture: ``user_factory('a@example.com')`` creates a user."""
    def create(email, **fields):
        fields.setdefault('name', email.split('@')[0].title())
        return User.objects.create_user(email=email, password='TestPass123!', **fields)
    return create
