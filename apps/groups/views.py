from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupMemberSerializer,
    InviteSerializer,
    JoinGroupSerializer,
    AddMemberSerializer,
    UpdateMemberRoleSerializer,
)

from apps.audit.models import AuditAction
from apps.audit.services import record_audit_event
from apps.groups.services import (
    create_group,
    get_group_for_member,
    get_user_groups,
    join_group,
    add_member,
    remove_member,
    get_group_members,
    update_member_role,
    invite_user,
    # Exceptions
    GroupNotFoundError,
    UserNotFoundError,
    InvalidInviteCodeError,
    GroupInactiveError,
    GroupFullError,
    AlreadyMemberError,
    NotMemberError,
    CannotRemoveOwnerError,
    CannotChangeOwnerRoleError,
    InsufficientPermissionsError,
)

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


class GroupViewSet(viewsets.GenericViewSet):
    """
    ViewSet for groups and their memberships.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Groups the user belongs to, with the user's role
    create: Create a new group (creator becomes admin member)
    retrieve: Group detail (members only)
    """

    serializer_class = GroupSerializer
    lookup_value_regex = UUID_PATTERN

    def get_serializer_class(self):
        if self.action == 'create':
            return GroupCreateSerializer
        return GroupSerializer

    def list(self, request):
        """List groups where the user is a member."""
        groups = get_user_groups(user=request.user)
        serializer = GroupSerializer(groups, many=True, context={'request': request})
        return Response({'groups': serializer.data})

    def create(self, request):
        """Create a new group."""
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            owner=request.user,
            description=serializer.validated_data.get('description', ''),
            max_members=serializer.validated_data['maxMembers'],
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response({'message': 'Group created successfully', 'group': output_serializer.data})

    def retrieve(self, request, pk=None):
        """Get a group the user belongs to."""
        try:
            group = get_group_for_member(group_id=pk, user=request.user)
        except GroupNotFoundError:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response(GroupSerializer(group, context={'request': request}).data)

    @extend_schema(
        methods=['POST'],
        request=AddMemberSerializer,
        responses={201: GroupMemberSerializer},
    )
    @extend_schema(methods=['GET'], responses={200: GroupMemberSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def members(self, request, pk=None):
        """List members, or add an existing user (owner/admin)."""
        if request.method == 'GET':
            try:
                memberships = get_group_members(group_id=pk, user=request.user)
            except GroupNotFoundError:
                return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)
            except InsufficientPermissionsError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            return Response({'members': GroupMemberSerializer(memberships, many=True).data})

        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = add_member(
                group_id=pk,
                user_id=serializer.validated_data['userId'],
                role=serializer.validated_data['role'],
                added_by=request.user,
            )
        except (GroupNotFoundError, UserNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (AlreadyMemberError, GroupFullError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        record_audit_event(
            action=AuditAction.GROUP_MEMBER_ADDED,
            entity_type='group',
            entity_id=membership.group_id,
            user=request.user,
            details={'memberId': str(membership.user_id), 'role': membership.role},
            request=request,
        )
        return Response(GroupMemberSerializer(membership).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UpdateMemberRoleSerializer, responses={200: GroupMemberSerializer})
    @action(
        detail=True,
        methods=['put', 'delete'],
        url_path=rf'members/(?P<user_id>{UUID_PATTERN})',
        url_name='member-detail',
    )
    def member_detail(self, request, pk=None, user_id=None):
        """Change a member's role (PUT) or remove them (DELETE)."""
        if request.method == 'DELETE':
            try:
                remove_member(group_id=pk, user_id=user_id, removed_by=request.user)
            except (GroupNotFoundError, NotMemberError) as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            except InsufficientPermissionsError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            except CannotRemoveOwnerError as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
            return Response({'message': 'Member removed successfully'})

        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = update_member_role(
                group_id=pk,
                user_id=user_id,
                new_role=serializer.validated_data['role'],
                updated_by=request.user
            )
        except (GroupNotFoundError, NotMemberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except CannotChangeOwnerRoleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GroupMemberSerializer(membership).data)

    @extend_schema(request=InviteSerializer)
    @action(detail=True, methods=['post'])
    def invite(self, request, pk=None):
        """Invite a registered user by email (owner/admin)."""
        serializer = InviteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invite_user(
                group_id=pk,
                email=serializer.validated_data['email'],
                role=serializer.validated_data['role'],
                message=serializer.validated_data.get('message'),
                invited_by=request.user,
            )
        except (GroupNotFoundError, UserNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (AlreadyMemberError, GroupFullError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Invitation sent'})

    @extend_schema(request=JoinGroupSerializer, responses={200: GroupMemberSerializer})
    @action(detail=True, methods=['post'])
    def join(self, request, pk=None):
        """Join a group using invite code."""
        serializer = JoinGroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = join_group(
                group_id=pk,
                user=request.user,
                invite_code=serializer.validated_data['inviteCode']
            )
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (
            GroupInactiveError,
            InvalidInviteCodeError,
            AlreadyMemberError,
            GroupFullError,
        ) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Joined group successfully',
            'member': GroupMemberSerializer(membership).data,
        })
