from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Notification, NotificationType
from .serializers import NotificationCreateSerializer, NotificationSerializer
from .services import get_notification_service


class NotificationViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """
    ViewSet for user notifications.

    GET    /notifications/?user_id=...        - List a user's notifications, newest first
    POST   /notifications/                    - Create and dispatch a notification
    GET    /notifications/{id}/               - Get notification detail
    DELETE /notifications/{id}/               - Delete notification

    Custom actions:
    - PATCH /notifications/{id}/mark-as-read/ {user_id} - Mark as read by its recipient
    - GET   /notifications/unread-count/?user_id=...    - Count of unread notifications
    """
    serializer_class = NotificationSerializer

    def get_serializer_class(self):
        if self.action == 'create':
            return NotificationCreateSerializer
        return NotificationSerializer

    def get_queryset(self):
        queryset = Notification.objects.all()
        if self.action == 'list':
            queryset = queryset.filter(recipient_id=self.request.query_params.get('user_id'))

            # Filter by type if provided
            notification_type = self.request.query_params.get('type')
            if notification_type and notification_type in NotificationType.values:
                queryset = queryset.filter(notification_type=notification_type)
        return queryset.order_by('-created_at')

    def list(self, request, *args, **kwargs):
        if not request.query_params.get('user_id'):
            return Response(
                {'error': 'user_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = NotificationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        notification = get_notification_service().create_and_send(**serializer.validated_data)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['patch'], url_path='mark-as-read')
    def mark_as_read(self, request, pk=None):
        """Mark a single notification as read"""
        user_id = request.data.get('user_id')
        if not user_id:
            return Response(
                {'error': 'user_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        notification = get_notification_service().mark_as_read(pk, user_id)
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        """Get count of unread notifications for a user"""
        user_id = request.query_params.get('user_id')
        if not user_id:
            return Response(
                {'error': 'user_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(
            {'unread_count': get_notification_service().unread_count(user_id)},
            status=status.HTTP_200_OK
        )
