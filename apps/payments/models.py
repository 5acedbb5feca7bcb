from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'
    REFUNDED = 'refunded', 'Refunded'


class PaymentType(models.TextChoices):
    MONTHLY = 'monthly', 'Monthly'
    INITIAL = 'initial', 'Initial'
    PROPORTIONAL = 'proportional', 'Proportional'


class Payment(models.Model):
    """A member's payment towards one billing period of a subscription."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='payments')
    subscription = models.ForeignKey(
        'subscriptions.Subscription',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, default='BRL')
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )
    type = models.CharField(max_length=20, choices=PaymentType.choices)

    billing_period_start = models.DateTimeField()
    billing_period_end = models.DateTimeField()

    payment_method = models.CharField(max_length=100, blank=True)
    external_payment_id = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='payments_user_created_idx'),
            models.Index(fields=['subscription', 'status'], name='payments_sub_status_idx'),
            models.Index(fields=['status', 'paid_at'], name='payments_status_paid_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} paid {self.amount} {self.currency} ({self.status})"

    def clean(self):
        if (
            self.billing_period_start and self.billing_period_end
            and self.billing_period_end < self.billing_period_start
        ):
            raise ValidationError({'billing_period_end': 'Billing period cannot end before it starts.'})

    @property
    def is_completed(self):
        return self.status == PaymentStatus.COMPLETED

    def mark_completed(self):
        """Mark payment as completed."""
        self.status = PaymentStatus.COMPLETED
        self.paid_at = self.paid_at or timezone.now()
        self.save(update_fields=['status', 'paid_at', 'updated_at'])


class FinancialSummary(models.Model):
    """Per-user monthly totals derived from completed payments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='financial_summaries')
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()
    total_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_saved = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'financial_summaries'
        unique_together = [['user', 'year', 'month']]
        ordering = ['-year', '-month']
        verbose_name_plural = 'financial summaries'

    def __str__(self):
        return f"{self.user} {self.year}-{self.month:02d}: paid {self.total_paid}, saved {self.total_saved}"
