from django.db import models
import uuid


class NotificationType(models.TextChoices):
    PAYMENT_REMINDER = 'payment-reminder', 'Payment Reminder'
    PAYMENT_CONFIRMED = 'payment-confirmed', 'Payment Confirmed'


class Notification(models.Model):
    """In-app notification addressed to one user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(max_length=30, choices=NotificationType.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()

    # Context for the client (group id, amount, sender)
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notifications_user_read_idx'),
            models.Index(fields=['user', 'created_at'], name='notifications_user_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} for {self.user.email}: {self.title}"
