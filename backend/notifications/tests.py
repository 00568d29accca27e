import uuid

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.test import TestCase, TransactionTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from notifications.models import Notification, NotificationChannel, NotificationType
from notifications.routing import websocket_urlpatterns
from notifications.services import NotificationService, group_name_for_user
from organizations.models import Organization
from user.models import AppUser


class FailingChannelLayer:
    async def group_send(self, group, message):
        raise RuntimeError("channel layer unavailable")


class NotificationModelTest(TestCase):
    """Test cases for Notification model"""

    def setUp(self):
        org = Organization.objects.create(name="Org One")
        self.recipient = AppUser.objects.create(organization=org, username='testuser')

    def test_notification_creation(self):
        notification = Notification.objects.create(
            recipient=self.recipient,
            notification_type=NotificationType.SYSTEM_ALERT,
            title='System Alert',
            content='The system is under maintenance',
        )

        self.assertEqual(notification.channel, NotificationChannel.WEBSOCKET)
        self.assertFalse(notification.sent)
        self.assertFalse(notification.is_read)
        self.assertEqual(notification.metadata, {})

    def test_mark_as_read_keeps_first_read_time(self):
        notification = Notification.objects.create(
            recipient=self.recipient,
            notification_type=NotificationType.POI_UPDATED,
            title='POI updated',
            content='Hotel Hilton has been updated',
        )
        notification.mark_as_read()
        first_read_at = notification.read_at
        notification.mark_as_read()

        notification.refresh_from_db()
        self.assertEqual(notification.read_at, first_read_at)

    def test_cascade_delete_recipient(self):
        Notification.objects.create(
            recipient=self.recipient,
            notification_type=NotificationType.SYSTEM_ALERT,
            title='Alert',
            content='Body',
        )
        self.recipient.delete()
        self.assertEqual(Notification.objects.count(), 0)


class NotificationServiceTest(TestCase):
    """Test cases for NotificationService"""

    def setUp(self):
        org = Organization.objects.create(name="Org One")
        self.recipient = AppUser.objects.create(organization=org, username='owner')
        self.other = AppUser.objects.create(organization=org, username='other')
        self.service = NotificationService()

    def test_websocket_notification_is_published_and_marked_sent(self):
        layer = get_channel_layer()
        channel_name = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(group_name_for_user(self.recipient.id), channel_name)

        notification = self.service.create_and_send(
            recipient_id=self.recipient.id,
            notification_type='POI_CREATED',
            title='POI created',
            content="'Hotel Hilton' has been created",
            channel='WEBSOCKET',
            metadata={'poi_id': '42'},
        )

        message = async_to_sync(layer.receive)(channel_name)
        self.assertEqual(message['type'], 'notification.message')
        self.assertEqual(message['payload']['id'], str(notification.id))
        self.assertEqual(message['payload']['type'], 'POI_CREATED')
        self.assertEqual(message['payload']['metadata'], {'poi_id': '42'})
        self.assertIn('timestamp', message['payload'])

        notification.refresh_from_db()
        self.assertTrue(notification.sent)
        self.assertIsNotNone(notification.sent_at)

    def test_email_channel_is_left_unsent(self):
        notification = self.service.create_and_send(
            recipient_id=self.recipient.id,
            notification_type='SYSTEM_ALERT',
            title='Maintenance',
            content='Tonight',
            channel='EMAIL',
        )
        notification.refresh_from_db()
        self.assertFalse(notification.sent)
        self.assertIsNone(notification.sent_at)

    def test_delivery_failure_is_logged_and_left_unsent(self):
        service = NotificationService(channel_layer=FailingChannelLayer())
        with self.assertLogs('notifications.services', level='ERROR'):
            notification = service.create_and_send(
                recipient_id=self.recipient.id,
                notification_type='SYSTEM_ALERT',
                title='Alert',
                content='Body',
            )
        self.assertTrue(Notification.objects.filter(id=notification.id, sent=False).exists())

    def test_unknown_recipient(self):
        with self.assertRaises(NotFoundError):
            self.service.create_and_send(
                recipient_id=uuid.uuid4(),
                notification_type='SYSTEM_ALERT',
                title='Alert',
                content='Body',
            )

    def test_unknown_type_or_channel(self):
        with self.assertRaises(ValidationError):
            self.service.create_and_send(self.recipient.id, 'LIKE', 'Title', 'Body')
        with self.assertRaises(ValidationError):
            self.service.create_and_send(self.recipient.id, 'SYSTEM_ALERT', 'Title', 'Body', channel='FAX')

    def test_notifications_for_user_and_unread_count(self):
        first = self.service.create_and_send(self.recipient.id, 'SYSTEM_ALERT', 'First', 'Body', channel='SMS')
        second = self.service.create_and_send(self.recipient.id, 'SYSTEM_ALERT', 'Second', 'Body', channel='SMS')
        self.service.create_and_send(self.other.id, 'SYSTEM_ALERT', 'Other', 'Body', channel='SMS')

        notifications = self.service.get_notifications_for_user(self.recipient.id)
        self.assertEqual({n.id for n in notifications}, {first.id, second.id})
        self.assertEqual(self.service.unread_count(self.recipient.id), 2)

        self.service.mark_as_read(first.id, self.recipient.id)
        self.assertEqual(self.service.unread_count(self.recipient.id), 1)

    def test_mark_as_read_by_other_user(self):
        notification = self.service.create_and_send(self.recipient.id, 'SYSTEM_ALERT', 'Title', 'Body')
        with self.assertRaises(PermissionDeniedError):
            self.service.mark_as_read(notification.id, self.other.id)
        with self.assertRaises(NotFoundError):
            self.service.mark_as_read(uuid.uuid4(), self.recipient.id)


class NotificationConsumerTest(TransactionTestCase):

    async def test_connected_client_receives_published_payload(self):
        user_id = uuid.uuid4()
        communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), f"/ws/notifications/{user_id}/")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        payload = {
            'id': str(uuid.uuid4()),
            'type': 'REVIEW_ADDED',
            'title': 'New review',
            'content': 'visitor rated Hotel Hilton 5/5',
            'metadata': {},
            'timestamp': '2024-05-01T10:00:00+00:00',
        }
        await get_channel_layer().group_send(
            group_name_for_user(user_id),
            {'type': 'notification.message', 'payload': payload},
        )

        self.assertEqual(await communicator.receive_json_from(), payload)
        await communicator.disconnect()


class NotificationAPITest(APITestCase):

    def setUp(self):
        org = Organization.objects.create(name="Org One")
        self.recipient = AppUser.objects.create(organization=org, username='owner')
        self.other = AppUser.objects.create(organization=org, username='other')
        self.list_url = reverse('notifications:notification-list')

    def test_create_and_list(self):
        response = self.client.post(self.list_url, {
            'recipient_id': str(self.recipient.id),
            'notification_type': 'SYSTEM_ALERT',
            'title': 'Maintenance',
            'content': 'Tonight at 22:00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['sent'])

        response = self.client.get(self.list_url, {'user_id': str(self.recipient.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

        response = self.client.get(self.list_url, {'user_id': str(self.other.id)})
        self.assertEqual(response.data['count'], 0)

    def test_list_requires_user(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mark_as_read_and_unread_count(self):
        notification = NotificationService().create_and_send(self.recipient.id, 'SYSTEM_ALERT', 'Title', 'Body')
        url = reverse('notifications:notification-mark-as-read', args=[notification.id])

        response = self.client.patch(url, {'user_id': str(self.other.id)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.patch(url, {'user_id': str(self.recipient.id)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_read'])

        response = self.client.get(
            reverse('notifications:notification-unread-count'), {'user_id': str(self.recipient.id)}
        )
        self.assertEqual(response.data['unread_count'], 0)
