import uuid
from django.db import models
from django.utils import timezone


class NotificationType(models.TextChoices):
    """Enumeration for notification types/actions"""
    POI_CREATED = 'POI_CREATED', 'POI Created'
    POI_UPDATED = 'POI_UPDATED', 'POI Updated'
    POI_DEACTIVATED = 'POI_DEACTIVATED', 'POI Deactivated'
    REVIEW_ADDED = 'REVIEW_ADDED', 'Review Added'
    SYSTEM_ALERT = 'SYSTEM_ALERT', 'System Alert'


class NotificationChannel(models.TextChoices):
    """Enumeration for delivery channels"""
    WEBSOCKET = 'WEBSOCKET', 'WebSocket'
    EMAIL = 'EMAIL', 'Email'
    PUSH_MOBILE = 'PUSH_MOBILE', 'Mobile Push'
    SMS = 'SMS', 'SMS'


class Notification(models.Model):
    """
    A persistent record of an alert sent to a user. This allows users to view
    a "History" tab even if they were not connected when it was delivered.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # The user who receives the notification
    recipient = models.ForeignKey(
        'user.AppUser',
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    notification_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        help_text="Type of notification: POI_CREATED, POI_UPDATED, POI_DEACTIVATED, REVIEW_ADDED, SYSTEM_ALERT"
    )

    # Header text
    title = models.CharField(max_length=200)

    # Main content
    content = models.TextField()

    channel = models.CharField(
        max_length=20,
        choices=NotificationChannel.choices,
        default=NotificationChannel.WEBSOCKET
    )

    # Extra payload for frontend navigation, e.g. {'poi_id': ...}
    metadata = models.JSONField(default=dict, blank=True)

    # Delivery status
    sent = models.BooleanField(default=False)
    sent_at = models.DateTimeField(null=True, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notification'
        indexes = [
            models.Index(fields=['recipient', 'created_at'], name='notif_recipient_created_idx'),
            models.Index(fields=['recipient', 'read_at'], name='notif_recipient_read_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.notification_type} notification for {self.recipient.username}"

    @property
    def is_read(self):
        return self.read_at is not None

    def mark_as_read(self):
        """Sets read_at once; later calls keep the first read time."""
        if self.read_at is None:
            self.read_at = timezone.now()
            self.save(update_fields=['read_at'])

    def mark_as_sent(self):
        self.sent = True
        self.sent_at = timezone.now()
        self.save(update_fields=['sent', 'sent_at'])

    def to_payload(self):
        """Message published to the recipient's WebSocket group."""
        return {
            'id': str(self.id),
            'type': self.notification_type,
            'title': self.title,
            'content': self.content,
            'metadata': self.metadata,
            'timestamp': self.created_at.isoformat(),
        }
