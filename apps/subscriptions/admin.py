# ==========================================
# apps/subscriptions/admin.py
# ==========================================

from django.contrib import admin
from .models import Subscription, SubscriptionMember


class SubscriptionMemberInline(admin.TabularInline):
    """Inline admin for member slots."""
    model = SubscriptionMember
    extra = 0
    fields = ['user', 'role', 'joined_at', 'last_payment', 'next_payment_due']
    readonly_fields = ['joined_at']


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    """Admin interface for Subscriptions."""

    list_display = [
        'name',
        'service_name',
        'owner',
        'total_price',
        'currency',
        'slots_display',
        'is_public',
        'is_active',
        'renewal_date',
    ]
    list_filter = ['is_public', 'is_active', 'currency', 'renewal_date']
    search_fields = ['name', 'service_name', 'owner__email']
    readonly_fields = ['current_members', 'credentials_id', 'last_password_change', 'created_at', 'updated_at']
    inlines = [SubscriptionMemberInline]
    ordering = ['-created_at']

    def slots_display(self, obj):
        return f"{obj.current_members}/{obj.max_members}"
    slots_display.short_description = 'Members'
