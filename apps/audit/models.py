from django.db import models
import uuid


class AuditSeverity(models.TextChoices):
    LOW = 'low', 'Low'
    MEDIUM = 'medium', 'Medium'
    HIGH = 'high', 'High'
    CRITICAL = 'critical', 'Critical'


class AuditAction(models.TextChoices):
    CREDENTIAL_CREATED = 'credential_created', 'Credential created'
    CREDENTIAL_ACCESSED = 'credential_accessed', 'Credential accessed'
    CREDENTIAL_UPDATED = 'credential_updated', 'Credential updated'
    CREDENTIAL_DELETED = 'credential_deleted', 'Credential deleted'
    GROUP_MEMBER_ADDED = 'group_member_added', 'Group member added'
    SUBSCRIPTION_MEMBER_ADDED = 'subscription_member_added', 'Subscription member added'
    ACCESS_REQUEST_APPROVED = 'access_request_approved', 'Access request approved'
    ACCESS_REQUEST_REJECTED = 'access_request_rejected', 'Access request rejected'


class AuditLog(models.Model):
    """Append-only record of a security-relevant action."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    action = models.CharField(max_length=100, choices=AuditAction.choices)
    entity_type = models.CharField(max_length=50)
    entity_id = models.UUIDField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    details = models.JSONField(default=dict, blank=True)
    severity = models.CharField(max_length=20, choices=AuditSeverity.choices, default=AuditSeverity.LOW)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='audit_user_created_idx'),
            models.Index(fields=['entity_type', 'entity_id'], name='audit_entity_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.action} on {self.entity_type}:{self.entity_id}"
