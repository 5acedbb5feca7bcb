# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from apps.groups.models import Group, GroupMember


class GroupMemberInline(admin.TabularInline):
    """Inline admin for group members."""
    model = GroupMember
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = ['name', 'owner', 'members_display', 'max_members', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'description', 'owner__email']
    readonly_fields = ['invite_code', 'created_at', 'updated_at']
    inlines = [GroupMemberInline]
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'owner', 'max_members', 'is_active')
        }),
        ('Invitation', {
            'fields': ('invite_code',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def members_display(self, obj):
        return f"{obj.member_count}/{obj.max_members}"
    members_display.short_description = 'Members'
