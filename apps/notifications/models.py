from django.db import models
import uuid


class NotificationType(models.TextChoices):
    GROUP_INVITE = 'group_invite', 'Group invite'
    ACCESS_REQUEST = 'access_request', 'Access request'
    ACCESS_REQUEST_CREATED = 'access_request_created', 'Access request created'
    ACCESS_REQUEST_APPROVED = 'access_request_approved', 'Access request approved'
    ACCESS_REQUEST_REJECTED = 'access_request_rejected', 'Access request rejected'
    PAYMENT_REMINDER = 'payment_reminder', 'Payment reminder'
    PAYMENT_OVERDUE = 'payment_overdue', 'Payment overdue'
    RENEWAL_ALERT = 'renewal_alert', 'Renewal alert'
    PASSWORD_CHANGE = 'password_change', 'Password change'
    PASSWORD_UPDATED = 'password_updated', 'Password updated'
    GENERAL = 'general', 'General'


# Types a client may create directly through POST /api/notifications/
USER_CREATABLE_TYPES = [
    NotificationType.ACCESS_REQUEST,
    NotificationType.PAYMENT_REMINDER,
    NotificationType.RENEWAL_ALERT,
    NotificationType.PASSWORD_CHANGE,
    NotificationType.GENERAL,
]


class Notification(models.Model):
    """Message addressed to one user, optionally pointing at another entity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=50, choices=NotificationType.choices, default=NotificationType.GENERAL)
    subscription = models.ForeignKey(
        'subscriptions.Subscription',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    related_entity_id = models.UUIDField(null=True, blank=True)
    related_entity_type = models.CharField(max_length=50, blank=True)
    action_url = models.CharField(max_length=500, blank=True)
    action_text = models.CharField(max_length=100, blank=True)

    is_read = models.BooleanField(default=False)
    is_archived = models.BooleanField(default=False)

    scheduled_for = models.DateTimeField(null=True, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
            models.Index(fields=['user', 'created_at'], name='notif_user_created_idx'),
            models.Index(fields=['type', 'related_entity_id'], name='notif_type_entity_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} -> {self.user}"
