from rest_framework import serializers


class CredentialCreateSerializer(serializers.Serializer):
    """Input for storing a subscription login."""

    subscriptionId = serializers.UUIDField(source='subscription_id')
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    username = serializers.CharField(min_length=1, max_length=255)
    password = serializers.CharField(min_length=1, max_length=1024, trim_whitespace=False)
    uri = serializers.URLField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=5000, required=False, allow_blank=True, default='')


class CredentialUpdateSerializer(serializers.Serializer):
    """Partial update; omitted fields keep their stored value."""

    username = serializers.CharField(min_length=1, max_length=255, required=False)
    password = serializers.CharField(min_length=1, max_length=1024, required=False, trim_whitespace=False)
    uri = serializers.URLField(required=False)
    notes = serializers.CharField(max_length=5000, required=False, allow_blank=True)


class GeneratePasswordSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['generate-password'])
    length = serializers.IntegerField(min_value=8, max_value=128, default=16)


class CredentialSerializer(serializers.Serializer):
    """Login as returned from the vault."""

    username = serializers.CharField()
    password = serializers.CharField()
    uri = serializers.CharField(allow_blank=True)
    notes = serializers.CharField(allow_blank=True)


class CredentialSubscriptionSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    serviceName = serializers.CharField(source='service_name')


class CredentialResponseSerializer(serializers.Serializer):
    subscription = CredentialSubscriptionSerializer()
    credential = CredentialSerializer()
