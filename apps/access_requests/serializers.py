from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import AccessRequest


class AccessRequestSerializer(serializers.ModelSerializer):
    """Access request with the requester and target subscription."""

    userId = serializers.UUIDField(source='user_id', read_only=True)
    user = UserMinimalSerializer(read_only=True)
    subscriptionId = serializers.UUIDField(source='subscription_id', read_only=True)
    subscriptionName = serializers.CharField(source='subscription.name', read_only=True)
    subscriptionService = serializers.CharField(source='subscription.service_name', read_only=True)
    adminResponse = serializers.CharField(source='admin_response', read_only=True)
    requestedAt = serializers.DateTimeField(source='requested_at', read_only=True)
    respondedAt = serializers.DateTimeField(source='responded_at', read_only=True)
    respondedBy = serializers.UUIDField(source='responded_by_id', read_only=True)

    class Meta:
        model = AccessRequest
        fields = [
            'id',
            'userId',
            'user',
            'subscriptionId',
            'subscriptionName',
            'subscriptionService',
            'status',
            'message',
            'adminResponse',
            'requestedAt',
            'respondedAt',
            'respondedBy',
        ]
        read_only_fields = fields


class AccessRequestCreateSerializer(serializers.Serializer):
    """Input for requesting a slot in a public subscription."""

    subscriptionId = serializers.UUIDField(source='subscription_id')
    message = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class AccessRequestQuerySerializer(serializers.Serializer):
    """Validate list query parameters."""

    type = serializers.ChoiceField(choices=['sent', 'received'], required=False)


class AccessRequestReviewSerializer(serializers.Serializer):
    """Input for approving or rejecting a request."""

    adminResponse = serializers.CharField(
        source='admin_response',
        max_length=500,
        required=False,
        allow_blank=True,
        default=''
    )
