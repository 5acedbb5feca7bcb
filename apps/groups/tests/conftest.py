import pytest
from apps.accounts.models import User
from apps.groups.models import GroupMember, MemberRole
from apps.groups.services import create_group


@pytest.fixture
def admin_user(db):
    """Create and return a user holding the admin role."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Group Admin',
    )


@pytest.fixture
def admin_client(make_client, admin_user):
    """Return API client authenticated as group admin."""
    return make_client(admin_user)


@pytest.fixture
def group(user):
    """Create and return a group owned by ``user``."""
    return create_group(
        name='Flat 4B',
        owner=user,
        description='Shared streaming for the flat',
        max_members=5,
    )


@pytest.fixture
def group_with_members(group, admin_user, member_user):
    """Group with owner, admin, and member."""
    GroupMember.objects.create(user=admin_user, group=group, role=MemberRole.ADMIN)
    GroupMember.objects.create(user=member_user, group=group, role=MemberRole.MEMBER)
    return group
