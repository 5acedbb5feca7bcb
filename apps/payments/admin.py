# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html

from .models import Payment, FinancialSummary, PaymentStatus
from .services import complete_payment, rebuild_all_financial_summaries, PaymentAlreadyCompletedError


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin interface for Payments.

    Completing a payment here is what feeds the monthly financial summaries.
    """

    list_display = [
        'user',
        'subscription',
        'amount',
        'currency',
        'type',
        'status_badge',
        'billing_period_start',
        'paid_at',
    ]
    list_filter = ['status', 'type', 'currency', 'created_at']
    search_fields = ['user__email', 'subscription__name', 'external_payment_id']
    readonly_fields = ['paid_at', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    actions = ['mark_completed']

    def status_badge(self, obj):
        colors = {
            PaymentStatus.PENDING: ('#E5C49A', '#2C1810'),
            PaymentStatus.COMPLETED: ('#6B8E5E', 'white'),
            PaymentStatus.FAILED: ('#B85C5C', 'white'),
            PaymentStatus.REFUNDED: ('#A47449', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    @admin.action(description='Mark selected payments as completed')
    def mark_completed(self, request, queryset):
        count = 0
        for payment in queryset:
            try:
                complete_payment(payment_id=payment.id)
            except PaymentAlreadyCompletedError:
                continue
            count += 1
        self.message_user(request, f'Marked {count} payment(s) as completed.')

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user', 'subscription')


@admin.register(FinancialSummary)
class FinancialSummaryAdmin(admin.ModelAdmin):
    list_display = ['user', 'year', 'month', 'total_paid', 'total_saved', 'updated_at']
    list_filter = ['year', 'month']
    search_fields = ['user__email']
    readonly_fields = ['total_paid', 'total_saved', 'created_at', 'updated_at']
    actions = ['rebuild']

    @admin.action(description='Rebuild summaries for the selected users')
    def rebuild(self, request, queryset):
        written = 0
        for user in {summary.user for summary in queryset.select_related('user')}:
            written += rebuild_all_financial_summaries(user=user)
        self.message_user(request, f'Rebuilt {written} summary row(s).')
