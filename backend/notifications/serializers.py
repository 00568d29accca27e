from rest_framework import serializers
from .models import Notification, NotificationChannel, NotificationType


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for Notification model"""
    recipient_id = serializers.UUIDField(read_only=True)
    is_read = serializers.BooleanField(read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id',
            'recipient_id',
            'notification_type',
            'title',
            'content',
            'channel',
            'metadata',
            'sent',
            'sent_at',
            'is_read',
            'read_at',
            'created_at',
        ]
        read_only_fields = fields


class NotificationCreateSerializer(serializers.Serializer):
    """Serializer for creating and dispatching a notification"""
    recipient_id = serializers.UUIDField()
    notification_type = serializers.ChoiceField(choices=NotificationType.choices)
    title = serializers.CharField(max_length=200)
    content = serializers.CharField()
    channel = serializers.ChoiceField(choices=NotificationChannel.choices, default=NotificationChannel.WEBSOCKET)
    metadata = serializers.JSONField(required=False, default=dict)
