from django.db import models
import uuid


class AccessRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class AccessRequest(models.Model):
    """
    A user's petition to join a public subscription.

    Status moves once, from pending to approved or rejected.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='access_requests')
    subscription = models.ForeignKey(
        'subscriptions.Subscription',
        on_delete=models.CASCADE,
        related_name='access_requests'
    )
    status = models.CharField(
        max_length=20,
        choices=AccessRequestStatus.choices,
        default=AccessRequestStatus.PENDING
    )
    message = models.TextField(blank=True)
    admin_response = models.TextField(blank=True)
    requested_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    responded_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='handled_access_requests'
    )

    class Meta:
        db_table = 'access_requests'
        indexes = [
            models.Index(fields=['subscription', 'status'], name='access_req_sub_status_idx'),
            models.Index(fields=['user', 'status'], name='access_req_user_status_idx'),
        ]
        ordering = ['-requested_at']

    def __str__(self):
        return f"{self.user} -> {self.subscription.name} ({self.status})"

    @property
    def is_pending(self):
        return self.status == AccessRequestStatus.PENDING
