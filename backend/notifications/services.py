"""
Notification service: persists notifications and dispatches them on their channel.
WebSocket delivery goes through the Channels layer; the other channels are
not wired to a provider yet and only log the message.
"""
import logging
import uuid
from typing import List, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from user.services import UserService
from .models import Notification, NotificationChannel, NotificationType

logger = logging.getLogger(__name__)


def group_name_for_user(user_id) -> str:
    """Channel layer group a user's WebSocket connections join."""
    return f"notifications_{user_id}"


class NotificationService:
    """
    Creates notification records and delivers them.
    Delivery problems are logged and leave the record unsent; they never
    fail the operation that triggered the notification.
    """

    def __init__(self, channel_layer=None):
        """
        Args:
            channel_layer: Channels layer to publish on. Defaults to the
                           project's configured default layer.
        """
        self.channel_layer = channel_layer or get_channel_layer()

    def create_and_send(self, recipient_id, notification_type: str, title: str, content: str,
                        channel: str = NotificationChannel.WEBSOCKET,
                        metadata: Optional[dict] = None) -> Notification:
        """
        Persists a notification for the recipient, then dispatches it.

        Args:
            recipient_id: UUID of the AppUser receiving the notification
            notification_type: One of NotificationType
            title: Notification title/header
            content: Notification body
            channel: One of NotificationChannel
            metadata: Optional dictionary with additional data payload

        Returns:
            Notification: The saved record, with sent/sent_at reflecting delivery
        """
        if notification_type not in NotificationType.values:
            raise ValidationError(f"Unknown notification type: {notification_type}")
        if channel not in NotificationChannel.values:
            raise ValidationError(f"Unknown notification channel: {channel}")

        recipient = UserService.get_user(recipient_id)

        with transaction.atomic():
            notification = Notification.objects.create(
                recipient=recipient,
                notification_type=notification_type,
                title=title,
                content=content,
                channel=channel,
                metadata=metadata or {},
            )
        logger.info(f"Notification {notification.id} ({notification_type}) created for user {recipient.id}")

        self.dispatch(notification)
        return notification

    def dispatch(self, notification: Notification) -> bool:
        """
        Sends a saved notification on its channel.

        Returns:
            bool: True if the notification was delivered and marked sent
        """
        if notification.channel == NotificationChannel.WEBSOCKET:
            return self._send_websocket(notification)

        # EMAIL, PUSH_MOBILE and SMS have no provider configured
        logger.info(
            f"{notification.channel} delivery not configured; notification {notification.id} "
            f"for user {notification.recipient_id} left unsent"
        )
        return False

    def _send_websocket(self, notification: Notification) -> bool:
        if self.channel_layer is None:
            logger.warning("No channel layer configured. Cannot send WebSocket notification.")
            return False

        group = group_name_for_user(notification.recipient_id)
        try:
            async_to_sync(self.channel_layer.group_send)(
                group,
                {'type': 'notification.message', 'payload': notification.to_payload()},
            )
        except Exception as e:
            logger.error(f"Error publishing notification {notification.id} to {group}: {str(e)}")
            return False

        notification.mark_as_sent()
        logger.debug(f"Notification {notification.id} published to {group}")
        return True

    @staticmethod
    def get_notifications_for_user(user_id) -> List[Notification]:
        return list(Notification.objects.filter(recipient_id=user_id).order_by('-created_at'))

    @staticmethod
    def mark_as_read(notification_id, user_id) -> Notification:
        """
        Marks a notification read on behalf of its recipient.
        Calling it again keeps the first read time.
        """
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            raise ValidationError(f"Invalid user ID: {user_id}")

        notification = Notification.objects.filter(id=notification_id).first()
        if notification is None:
            raise NotFoundError.for_id("Notification", notification_id)
        if notification.recipient_id != user_id:
            raise PermissionDeniedError("Notification does not belong to this user")

        notification.mark_as_read()
        return notification

    @staticmethod
    def unread_count(user_id) -> int:
        return Notification.objects.filter(recipient_id=user_id, read_at__isnull=True).count()


# Global instance for easy access
_notification_service = None


def get_notification_service() -> NotificationService:
    """
    Get or create a global NotificationService instance.

    Returns:
        NotificationService: The notification service instance
    """
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
