import pytest
from django.urls import reverse
from rest_framework import status
from apps.audit.models import AuditLog, AuditAction
from apps.groups.models import Group, GroupMember, MemberRole
from apps.notifications.models import Notification, NotificationType


# =============================================================================
# Group CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupList:
    """Tests for GET /api/groups/"""

    def test_list_groups_returns_user_groups(self, authenticated_client, group):
        """List returns only groups where user is a member."""
        url = reverse('groups:group-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['groups']) == 1
        assert response.data['groups'][0]['name'] == group.name
        assert response.data['groups'][0]['role'] == MemberRole.ADMIN
        assert response.data['groups'][0]['memberCount'] == 1

    def test_list_groups_envelope(self, authenticated_client, group):
        """The list is wrapped in a groups key, without pagination fields."""
        response = authenticated_client.get(reverse('groups:group-list'))

        assert set(response.data) == {'groups'}

    def test_list_groups_excludes_non_member_groups(self, other_client, group):
        """Non-members don't see group in list."""
        url = reverse('groups:group-list')
        response = other_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['groups']) == 0

    def test_list_groups_unauthenticated(self, api_client):
        """Unauthenticated users cannot list groups."""
        url = reverse('groups:group-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestGroupCreate:
    """Tests for POST /api/groups/"""

    def test_create_group(self, authenticated_client, user):
        """Create a new group; the creator becomes an admin member."""
        url = reverse('groups:group-list')
        data = {'name': 'Roommates', 'description': 'Bills', 'maxMembers': 4}
        response = authenticated_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Group created successfully'
        assert response.data['group']['maxMembers'] == 4
        assert response.data['group']['ownerId'] == str(user.id)

        group = Group.objects.get(name='Roommates')
        assert group.owner == user
        assert group.get_user_role(user) == MemberRole.ADMIN

    def test_create_group_defaults_to_ten_members(self, authenticated_client):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {'name': 'Defaults'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['group']['maxMembers'] == 10
        assert len(response.data['group']['inviteCode']) == 16

    @pytest.mark.parametrize('max_members', [1, 51])
    def test_create_group_capacity_bounds(self, authenticated_client, max_members):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {'name': 'Bad', 'maxMembers': max_members})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'maxMembers' in response.data['details']

    def test_create_group_requires_name(self, authenticated_client):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {'description': 'No name'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestGroupRetrieve:
    """Tests for GET /api/groups/{id}/"""

    def test_retrieve_group_as_member(self, member_client, group_with_members):
        url = reverse('groups:group-detail', args=[group_with_members.id])
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == group_with_members.name
        assert response.data['memberCount'] == 3
        assert response.data['role'] == MemberRole.MEMBER

    def test_retrieve_group_as_non_member(self, other_client, group):
        """Non-members get 404 rather than 403."""
        url = reverse('groups:group-detail', args=[group.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Group not found'


# =============================================================================
# Membership Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupMembers:
    """Tests for /api/groups/{id}/members/"""

    def test_list_members(self, authenticated_client, group_with_members):
        url = reverse('groups:group-members', args=[group_with_members.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['members']) == 3

    def test_list_members_forbidden_for_outsider(self, other_client, group):
        url = reverse('groups:group-members', args=[group.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_add_member_as_owner(self, authenticated_client, group, other_user):
        url = reverse('groups:group-members', args=[group.id])
        response = authenticated_client.post(url, {'userId': str(other_user.id)})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['role'] == MemberRole.MEMBER
        assert group.has_member(other_user)
        assert AuditLog.objects.filter(action=AuditAction.GROUP_MEMBER_ADDED, entity_id=group.id).exists()

    def test_add_member_as_plain_member_forbidden(self, member_client, group_with_members, other_user):
        url = reverse('groups:group-members', args=[group_with_members.id])
        response = member_client.post(url, {'userId': str(other_user.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_add_existing_member(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-members', args=[group_with_members.id])
        response = authenticated_client.post(url, {'userId': str(member_user.id)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'User is already a member'

    def test_add_member_to_full_group(self, authenticated_client, group, user_factory):
        for i in range(group.max_members - 1):
            GroupMember.objects.create(group=group, user=user_factory(f'filler{i}@example.com'))
        newcomer = user_factory('late@example.com')

        url = reverse('groups:group-members', args=[group.id])
        response = authenticated_client.post(url, {'userId': str(newcomer.id)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Group is full'

    def test_add_unknown_user(self, authenticated_client, group):
        url = reverse('groups:group-members', args=[group.id])
        response = authenticated_client.post(url, {'userId': '00000000-0000-0000-0000-000000000000'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_member_role(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-member-detail', args=[group_with_members.id, member_user.id])
        response = authenticated_client.put(url, {'role': MemberRole.ADMIN})

        assert response.status_code == status.HTTP_200_OK
        assert group_with_members.get_user_role(member_user) == MemberRole.ADMIN

    def test_cannot_change_owner_role(self, admin_client, group_with_members, user):
        url = reverse('groups:group-member-detail', args=[group_with_members.id, user.id])
        response = admin_client.put(url, {'role': MemberRole.MEMBER})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_remove_member_as_owner(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-member-detail', args=[group_with_members.id, member_user.id])
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not group_with_members.has_member(member_user)

    def test_member_can_leave(self, member_client, group_with_members, member_user):
        url = reverse('groups:group-member-detail', args=[group_with_members.id, member_user.id])
        response = member_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not group_with_members.has_member(member_user)

    def test_cannot_remove_owner(self, admin_client, group_with_members, user):
        url = reverse('groups:group-member-detail', args=[group_with_members.id, user.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Cannot remove the group owner'

    def test_admin_cannot_remove_admin(self, admin_client, group_with_members, user_factory):
        other_admin = user_factory('admin2@example.com')
        GroupMember.objects.create(group=group_with_members, user=other_admin, role=MemberRole.ADMIN)

        url = reverse('groups:group-member-detail', args=[group_with_members.id, other_admin.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Invite / Join Tests
# =============================================================================

@pytest.mark.django_db
class TestInviteAndJoin:
    """Tests for /api/groups/{id}/invite/ and /api/groups/{id}/join/"""

    def test_invite_creates_notification_not_membership(self, authenticated_client, group, other_user):
        url = reverse('groups:group-invite', args=[group.id])
        response = authenticated_client.post(url, {'email': other_user.email, 'message': 'Come along'})

        assert response.status_code == status.HTTP_200_OK
        assert not group.has_member(other_user)

        invite = Notification.objects.get(user=other_user, type=NotificationType.GROUP_INVITE)
        assert invite.related_entity_id == group.id
        assert group.invite_code in invite.action_url
        assert 'Come along' in invite.message

    def test_invite_unknown_email(self, authenticated_client, group):
        url = reverse('groups:group-invite', args=[group.id])
        response = authenticated_client.post(url, {'email': 'ghost@example.com'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invite_existing_member(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-invite', args=[group_with_members.id])
        response = authenticated_client.post(url, {'email': member_user.email})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invite_as_plain_member_forbidden(self, member_client, group_with_members, other_user):
        url = reverse('groups:group-invite', args=[group_with_members.id])
        response = member_client.post(url, {'email': other_user.email})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_join_with_code(self, other_client, group, other_user):
        url = reverse('groups:group-join', args=[group.id])
        response = other_client.post(url, {'inviteCode': group.invite_code})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['member']['role'] == MemberRole.MEMBER
        assert group.has_member(other_user)

    def test_join_marks_invite_read(self, authenticated_client, other_client, group, other_user):
        authenticated_client.post(reverse('groups:group-invite', args=[group.id]), {'email': other_user.email})

        other_client.post(reverse('groups:group-join', args=[group.id]), {'inviteCode': group.invite_code})

        invite = Notification.objects.get(user=other_user, type=NotificationType.GROUP_INVITE)
        assert invite.is_read is True

    def test_join_with_wrong_code(self, other_client, group):
        url = reverse('groups:group-join', args=[group.id])
        response = other_client.post(url, {'inviteCode': 'wrong'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid invite code'

    def test_join_twice(self, member_client, group_with_members):
        url = reverse('groups:group-join', args=[group_with_members.id])
        response = member_client.post(url, {'inviteCode': group_with_members.invite_code})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'User is already a member'
