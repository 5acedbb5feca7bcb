from rest_framework import serializers
from .models import AuditLog, AuditSeverity


class AuditLogSerializer(serializers.ModelSerializer):
    entityType = serializers.CharField(source='entity_type')
    entityId = serializers.UUIDField(source='entity_id', allow_null=True)
    ipAddress = serializers.CharField(source='ip_address', allow_null=True)
    userAgent = serializers.CharField(source='user_agent')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'action',
            'entityType',
            'entityId',
            'ipAddress',
            'userAgent',
            'details',
            'severity',
            'createdAt',
        ]
        read_only_fields = fields


class AuditLogQuerySerializer(serializers.Serializer):
    """Validate audit log query parameters."""

    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=50)
    action = serializers.CharField(required=False, allow_blank=True)
    entityType = serializers.CharField(source='entity_type', required=False, allow_blank=True)
    severity = serializers.ChoiceField(choices=AuditSeverity.choices, required=False)
    startDate = serializers.DateField(source='start_date', required=False)
    endDate = serializers.DateField(source='end_date', required=False)
    search = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'startDate': 'startDate must be before endDate'})
        return attrs
