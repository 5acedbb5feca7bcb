from django.contrib import admin
from .models import AccessRequest


@admin.register(AccessRequest)
class AccessRequestAdmin(admin.ModelAdmin):
    """Admin interface for access requests."""

    list_display = ['user', 'subscription', 'status', 'requested_at', 'responded_at', 'responded_by']
    list_filter = ['status', 'requested_at']
    search_fields = ['user__email', 'subscription__name', 'subscription__service_name']
    readonly_fields = ['requested_at', 'responded_at', 'responded_by']
    ordering = ['-requested_at']
