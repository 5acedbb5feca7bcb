# ==========================================
# apps/groups/models.py
# ==========================================

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid
import secrets


def generate_invite_code():
    return secrets.token_urlsafe(12)[:16]


class MemberRole(models.TextChoices):
    """Role of a membership row; ownership is tracked by the owner FK."""
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'


class Group(models.Model):
    """Users sharing administrative context for one or more subscriptions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_groups')
    max_members = models.PositiveSmallIntegerField(
        default=10,
        validators=[MinValueValidator(2), MaxValueValidator(50)]
    )
    invite_code = models.CharField(max_length=50, unique=True, db_index=True, editable=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='groups_owner_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.invite_code:
            self.invite_code = generate_invite_code()
        super().save(*args, **kwargs)

    @property
    def member_count(self):
        return self.members.count()

    @property
    def is_full(self):
        return self.member_count >= self.max_members

    def has_member(self, user):
        return self.members.filter(user=user).exists()

    def get_user_role(self, user):
        try:
            return self.members.get(user=user).role
        except GroupMember.DoesNotExist:
            return None

    def is_owner(self, user):
        return self.owner_id == user.id

    def is_admin(self, user):
        """Owner or a member holding the admin role."""
        return self.is_owner(user) or self.get_user_role(user) == MemberRole.ADMIN


class GroupMember(models.Model):
    """User membership in a group with role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='members')
    role = models.CharField(max_length=20, choices=MemberRole.choices, default=MemberRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_members'
        unique_together = [['group', 'user']]
        indexes = [
            models.Index(fields=['group', 'role'], name='group_members_role_idx'),
            models.Index(fields=['user', 'joined_at'], name='group_members_user_joined_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name} ({self.role})"
