from decimal import Decimal

from rest_framework import serializers

from .models import Payment, PaymentStatus, PaymentType


class PaymentSerializer(serializers.ModelSerializer):
    subscriptionId = serializers.UUIDField(source='subscription_id')
    subscriptionName = serializers.CharField(source='subscription.name')
    serviceName = serializers.CharField(source='subscription.service_name')
    billingPeriodStart = serializers.DateTimeField(source='billing_period_start')
    billingPeriodEnd = serializers.DateTimeField(source='billing_period_end')
    paymentMethod = serializers.CharField(source='payment_method')
    externalPaymentId = serializers.CharField(source='external_payment_id')
    paidAt = serializers.DateTimeField(source='paid_at', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Payment
        fields = [
            'id',
            'subscriptionId',
            'subscriptionName',
            'serviceName',
            'amount',
            'currency',
            'status',
            'type',
            'billingPeriodStart',
            'billingPeriodEnd',
            'paymentMethod',
            'externalPaymentId',
            'description',
            'paidAt',
            'createdAt',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """Input for recording a payment."""

    subscriptionId = serializers.UUIDField(source='subscription_id')
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    type = serializers.ChoiceField(choices=PaymentType.choices)
    billingPeriodStart = serializers.DateTimeField(source='billing_period_start')
    billingPeriodEnd = serializers.DateTimeField(source='billing_period_end')
    paymentMethod = serializers.CharField(
        source='payment_method', max_length=100, required=False, allow_blank=True, default=''
    )
    externalPaymentId = serializers.CharField(
        source='external_payment_id', max_length=255, required=False, allow_blank=True, default=''
    )
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['billing_period_end'] < attrs['billing_period_start']:
            raise serializers.ValidationError(
                {'billingPeriodEnd': 'billingPeriodEnd must not be before billingPeriodStart'}
            )
        return attrs


class PaymentQuerySerializer(serializers.Serializer):
    """Validate list query parameters."""

    subscriptionId = serializers.UUIDField(source='subscription_id', required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=50)
