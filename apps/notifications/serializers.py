from rest_framework import serializers

from apps.subscriptions.models import Subscription
from .models import Notification, NotificationType, USER_CREATABLE_TYPES


class NotificationSerializer(serializers.ModelSerializer):
    subscriptionId = serializers.UUIDField(source='subscription_id', allow_null=True)
    subscriptionName = serializers.SerializerMethodField()
    relatedEntityId = serializers.UUIDField(source='related_entity_id', allow_null=True)
    relatedEntityType = serializers.CharField(source='related_entity_type')
    actionUrl = serializers.CharField(source='action_url')
    actionText = serializers.CharField(source='action_text')
    isRead = serializers.BooleanField(source='is_read')
    readAt = serializers.DateTimeField(source='read_at', allow_null=True)
    scheduledFor = serializers.DateTimeField(source='scheduled_for', allow_null=True)
    sentAt = serializers.DateTimeField(source='sent_at', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'type',
            'subscriptionId',
            'subscriptionName',
            'relatedEntityId',
            'relatedEntityType',
            'actionUrl',
            'actionText',
            'isRead',
            'readAt',
            'scheduledFor',
            'sentAt',
            'createdAt',
        ]
        read_only_fields = fields

    def get_subscriptionName(self, obj):
        return obj.subscription.name if obj.subscription_id else None


class NotificationCreateSerializer(serializers.Serializer):
    """Input for a notification the caller addresses to themselves."""

    title = serializers.CharField(min_length=1, max_length=255)
    message = serializers.CharField(min_length=1, max_length=1000)
    type = serializers.ChoiceField(choices=USER_CREATABLE_TYPES)
    subscriptionId = serializers.PrimaryKeyRelatedField(
        source='subscription',
        queryset=Subscription.objects.all(),
        required=False,
        allow_null=True
    )
    relatedEntityId = serializers.UUIDField(source='related_entity_id', required=False, allow_null=True)
    relatedEntityType = serializers.CharField(
        source='related_entity_type', max_length=50, required=False, allow_blank=True, default=''
    )
    actionUrl = serializers.CharField(source='action_url', max_length=500, required=False, allow_blank=True, default='')
    actionText = serializers.CharField(source='action_text', max_length=100, required=False, allow_blank=True, default='')
    scheduledFor = serializers.DateTimeField(source='scheduled_for', required=False, allow_null=True)


class NotificationQuerySerializer(serializers.Serializer):
    """
    Validate list query parameters.

    Query Parameters:
        unreadOnly (bool): Only unread notifications
        type (str): Filter by notification type
        limit (int): Max rows 1..100, default 50
    """

    unreadOnly = serializers.BooleanField(source='unread_only', required=False, default=False)
    type = serializers.ChoiceField(choices=NotificationType.choices, required=False)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=50)
