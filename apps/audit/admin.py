from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""

    list_display = ['action', 'entity_type', 'entity_id', 'user', 'severity', 'ip_address', 'created_at']
    list_filter = ['action', 'severity', 'entity_type', 'created_at']
    search_fields = ['user__email', 'entity_type', 'action']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
