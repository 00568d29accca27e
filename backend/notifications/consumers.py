"""
WebSocket consumer pushing a user's notifications as they are published.
"""
import logging
import uuid

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .services import group_name_for_user

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncJsonWebsocketConsumer):
    """
    Joins the connecting user's notification group and forwards every
    payload published to it. The connection is read-only for the client.
    """

    group_name = None

    async def connect(self):
        try:
            user_id = uuid.UUID(self.scope['url_route']['kwargs']['user_id'])
        except ValueError:
            await self.close()
            return

        self.group_name = group_name_for_user(user_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.debug(f"WebSocket {self.channel_name} joined {self.group_name}")

    async def disconnect(self, code):
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def notification_message(self, event):
        await self.send_json(event['payload'])
