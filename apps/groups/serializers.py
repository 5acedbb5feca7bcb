from rest_framework import serializers
from .models import Group, GroupMember, MemberRole
from apps.accounts.serializers import UserMinimalSerializer


class GroupMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""

    userId = serializers.UUIDField(source='user_id', read_only=True)
    groupId = serializers.UUIDField(source='group_id', read_only=True)
    user = UserMinimalSerializer(read_only=True)
    joinedAt = serializers.DateTimeField(source='joined_at', read_only=True)

    class Meta:
        model = GroupMember
        fields = ['id', 'groupId', 'userId', 'user', 'role', 'joinedAt']
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    ownerId = serializers.UUIDField(source='owner_id', read_only=True)
    maxMembers = serializers.IntegerField(source='max_members', read_only=True)
    inviteCode = serializers.CharField(source='invite_code', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    memberCount = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'ownerId',
            'maxMembers',
            'inviteCode',
            'isActive',
            'memberCount',
            'role',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields

    def get_memberCount(self, obj):
        """Use the list annotation when present."""
        total = getattr(obj, 'members_total', None)
        return total if total is not None else obj.members.count()

    def get_role(self, obj):
        """Current user's role in the group."""
        annotated = getattr(obj, 'user_role', None)
        if annotated is not None:
            return annotated
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class GroupCreateSerializer(serializers.Serializer):
    """Input for creating groups."""

    name = serializers.CharField(min_length=1, max_length=255)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    maxMembers = serializers.IntegerField(min_value=2, max_value=50, default=10)


class InviteSerializer(serializers.Serializer):
    """Input for inviting a user by email."""

    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=MemberRole.choices, default=MemberRole.MEMBER)
    message = serializers.CharField(max_length=500, required=False, allow_blank=True)


class JoinGroupSerializer(serializers.Serializer):
    """Serializer for joining a group with invite code."""

    inviteCode = serializers.CharField(max_length=50)


class AddMemberSerializer(serializers.Serializer):
    """Input for adding an existing user directly."""

    userId = serializers.UUIDField()
    role = serializers.ChoiceField(choices=MemberRole.choices, default=MemberRole.MEMBER)


class UpdateMemberRoleSerializer(serializers.Serializer):
    """Serializer for updating member role."""

    role = serializers.ChoiceField(choices=MemberRole.choices)
