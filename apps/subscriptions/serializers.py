"""
Serializers for subscriptions app.

Input serializers map camelCase request keys onto model field names via
``source=`` so views can pass ``validated_data`` straight to services.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import Subscription, SubscriptionMember


# =============================================================================
# Output Serializers
# =============================================================================

class SubscriptionSerializer(serializers.ModelSerializer):
    """Subscription as seen by its owner and members."""

    serviceName = serializers.CharField(source='service_name')
    ownerId = serializers.UUIDField(source='owner_id')
    groupId = serializers.UUIDField(source='group_id', allow_null=True)
    groupName = serializers.SerializerMethodField()
    totalPrice = serializers.DecimalField(source='total_price', max_digits=10, decimal_places=2)
    maxMembers = serializers.IntegerField(source='max_members')
    currentMembers = serializers.IntegerField(source='current_members')
    isPublic = serializers.BooleanField(source='is_public')
    isActive = serializers.BooleanField(source='is_active')
    renewalDate = serializers.DateTimeField(source='renewal_date')
    role = serializers.SerializerMethodField()
    hasCredentials = serializers.SerializerMethodField()
    lastPasswordChange = serializers.DateTimeField(source='last_password_change', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = Subscription
        fields = [
            'id',
            'name',
            'serviceName',
            'description',
            'ownerId',
            'groupId',
            'groupName',
            'totalPrice',
            'currency',
            'maxMembers',
            'currentMembers',
            'isPublic',
            'isActive',
            'renewalDate',
            'role',
            'hasCredentials',
            'lastPasswordChange',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields

    def get_groupName(self, obj):
        return obj.group.name if obj.group_id else None

    def get_role(self, obj):
        annotated = getattr(obj, 'user_role', None)
        if annotated is not None:
            return annotated
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None

    def get_hasCredentials(self, obj):
        return bool(obj.credentials_id)


class PublicSubscriptionSerializer(serializers.ModelSerializer):
    """Marketplace row with derived slot pricing."""

    serviceName = serializers.CharField(source='service_name')
    owner = UserMinimalSerializer()
    totalPrice = serializers.DecimalField(source='total_price', max_digits=10, decimal_places=2)
    maxMembers = serializers.IntegerField(source='max_members')
    currentMembers = serializers.IntegerField(source='current_members')
    renewalDate = serializers.DateTimeField(source='renewal_date')
    pricePerMember = serializers.DecimalField(source='price_per_member', max_digits=10, decimal_places=2)
    availableSpots = serializers.IntegerField(source='available_spots')
    percentageFilled = serializers.IntegerField(source='percentage_filled')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Subscription
        fields = [
            'id',
            'name',
            'serviceName',
            'description',
            'owner',
            'totalPrice',
            'currency',
            'maxMembers',
            'currentMembers',
            'renewalDate',
            'pricePerMember',
            'availableSpots',
            'percentageFilled',
            'createdAt',
        ]
        read_only_fields = fields


class SubscriptionMemberSerializer(serializers.ModelSerializer):
    """Member slot with nested user."""

    userId = serializers.UUIDField(source='user_id', read_only=True)
    subscriptionId = serializers.UUIDField(source='subscription_id', read_only=True)
    user = UserMinimalSerializer(read_only=True)
    joinedAt = serializers.DateTimeField(source='joined_at', read_only=True)
    lastPayment = serializers.DateTimeField(source='last_payment', read_only=True)
    nextPaymentDue = serializers.DateTimeField(source='next_payment_due', read_only=True)

    class Meta:
        model = SubscriptionMember
        fields = ['id', 'subscriptionId', 'userId', 'user', 'role', 'joinedAt', 'lastPayment', 'nextPaymentDue']
        read_only_fields = fields


# =============================================================================
# Input Serializers
# =============================================================================

class SubscriptionCreateSerializer(serializers.Serializer):
    """Input for creating subscriptions."""

    name = serializers.CharField(min_length=1, max_length=255)
    serviceName = serializers.CharField(source='service_name', min_length=1, max_length=255)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    groupId = serializers.UUIDField(source='group_id', required=False, allow_null=True)
    totalPrice = serializers.DecimalField(
        source='total_price',
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    currency = serializers.CharField(min_length=3, max_length=3, default='BRL')
    maxMembers = serializers.IntegerField(source='max_members', min_value=1, max_value=50)
    isPublic = serializers.BooleanField(source='is_public', default=False)
    renewalDate = serializers.DateTimeField(source='renewal_date')

    def validate_currency(self, value):
        return value.upper()


class SubscriptionUpdateSerializer(serializers.Serializer):
    """Partial update input (owner only)."""

    name = serializers.CharField(min_length=1, max_length=255, required=False)
    serviceName = serializers.CharField(source='service_name', min_length=1, max_length=255, required=False)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    totalPrice = serializers.DecimalField(
        source='total_price',
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    currency = serializers.CharField(min_length=3, max_length=3, required=False)
    maxMembers = serializers.IntegerField(source='max_members', min_value=1, max_value=50, required=False)
    isPublic = serializers.BooleanField(source='is_public', required=False)
    renewalDate = serializers.DateTimeField(source='renewal_date', required=False)

    def validate_currency(self, value):
        return value.upper()


class PublicSubscriptionQuerySerializer(serializers.Serializer):
    """
    Validate public listing query parameters.

    Query Parameters:
        search (str): Match on name, service name or description
        service (str): Match on service name
        maxPrice (decimal): Upper bound (exclusive) on total price
        availableSpots (bool): Only subscriptions with free slots
        page (int): Page number, default 1
        limit (int): Page size 1..50, default 20
    """

    search = serializers.CharField(required=False, allow_blank=True)
    service = serializers.CharField(required=False, allow_blank=True)
    maxPrice = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    availableSpots = serializers.BooleanField(required=False, default=False)
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=50, default=20)
