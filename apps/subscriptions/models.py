# ==========================================
# apps/subscriptions/models.py
# ==========================================

from decimal import Decimal, ROUND_HALF_UP
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid

from apps.groups.models import MemberRole


class Subscription(models.Model):
    """A paid service shared among members up to ``max_members``."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    service_name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_subscriptions')
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='subscriptions'
    )

    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, default='BRL')
    max_members = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(50)]
    )
    current_members = models.PositiveSmallIntegerField(default=1)

    is_public = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    renewal_date = models.DateTimeField()

    # Opaque identifier of the credential held by the external vault
    credentials_id = models.CharField(max_length=255, blank=True)
    last_password_change = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscriptions'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='subs_owner_created_idx'),
            models.Index(fields=['is_public', 'is_active'], name='subs_public_active_idx'),
            models.Index(fields=['renewal_date'], name='subs_renewal_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.service_name})"

    @property
    def is_full(self):
        return self.current_members >= self.max_members

    @property
    def available_spots(self):
        return max(self.max_members - self.current_members, 0)

    @property
    def price_per_member(self):
        """Price of one slot when the subscription is full."""
        return (self.total_price / self.max_members).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def percentage_filled(self):
        return round(self.current_members / self.max_members * 100)

    def has_member(self, user):
        return self.members.filter(user=user).exists()

    def get_user_role(self, user):
        try:
            return self.members.get(user=user).role
        except SubscriptionMember.DoesNotExist:
            return None

    def is_owner(self, user):
        return self.owner_id == user.id

    def is_admin(self, user):
        """Owner or a member holding the admin role."""
        return self.is_owner(user) or self.get_user_role(user) == MemberRole.ADMIN


class SubscriptionMember(models.Model):
    """User's slot in a subscription."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    subscription = models.ForeignKey(Subscription, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='subscription_memberships')
    role = models.CharField(max_length=20, choices=MemberRole.choices, default=MemberRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)
    last_payment = models.DateTimeField(null=True, blank=True)
    next_payment_due = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'subscription_members'
        unique_together = [['subscription', 'user']]
        indexes = [
            models.Index(fields=['user', 'joined_at'], name='sub_members_user_joined_idx'),
            models.Index(fields=['next_payment_due'], name='sub_members_next_due_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user} in {self.subscription.name} ({self.role})"
