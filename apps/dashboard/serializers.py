"""
Response serializers for the dashboard.

Used for API documentation only; the queries already return plain dicts.
"""

from rest_framework import serializers


class CurrentMonthSerializer(serializers.Serializer):
    totalPaid = serializers.FloatField()
    totalSaved = serializers.FloatField()
    savingsPercentage = serializers.FloatField()
    subscriptionCount = serializers.IntegerField()


class LifetimeSerializer(serializers.Serializer):
    totalPaid = serializers.FloatField()
    totalSaved = serializers.FloatField()


class SubscriptionBreakdownSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    serviceName = serializers.CharField()
    fullPrice = serializers.FloatField()
    yourShare = serializers.FloatField()
    savings = serializers.FloatField()
    members = serializers.IntegerField()
    role = serializers.CharField()


class MonthlySummarySerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    totalPaid = serializers.FloatField()
    totalSaved = serializers.FloatField()


class FinancialOverviewSerializer(serializers.Serializer):
    """Response serializer for the financial dashboard."""
    currentMonth = CurrentMonthSerializer()
    lifetime = LifetimeSerializer()
    subscriptionBreakdown = SubscriptionBreakdownSerializer(many=True)
    recentPayments = serializers.ListField(child=serializers.DictField())
    monthlySummaries = MonthlySummarySerializer(many=True)


class AlertSerializer(serializers.Serializer):
    type = serializers.CharField()
    severity = serializers.ChoiceField(choices=['critical', 'warning', 'info'])
    title = serializers.CharField()
    description = serializers.CharField()
    actionUrl = serializers.CharField()
    actionText = serializers.CharField()


class AlertGroupsSerializer(serializers.Serializer):
    critical = AlertSerializer(many=True)
    warning = AlertSerializer(many=True)
    info = AlertSerializer(many=True)


class AlertSummarySerializer(serializers.Serializer):
    critical = serializers.IntegerField()
    warning = serializers.IntegerField()
    info = serializers.IntegerField()
    unreadNotifications = serializers.IntegerField()


class AlertsResponseSerializer(serializers.Serializer):
    """Response serializer for the alert digest."""
    summary = AlertSummarySerializer()
    alerts = AlertGroupsSerializer()
    lastUpdated = serializers.DateTimeField()
