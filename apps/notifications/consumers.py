# apps/notifications/consumers.py

import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.http.cookie import parse_cookie
from django.utils import timezone

from apps.core.exceptions import Unauthenticated
from apps.core.tokens import read_session_token

from .registry import channel_registry

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncWebsocketConsumer):
    """
    Per-user notification channel

    Protocol:
    - client -> {"type": "join", "userId": ...} binds the connection
    - client -> {"type": "ping"} answered with "pong"
    - server -> {"type": "event", "event": ..., "payload": ...}

    The declared user id must match the session token cookie sent with
    the handshake.
    """

    registry = channel_registry

    async def connect(self):
        await self.accept()
        logger.info(f"🔔 WebSocket connected - {self.channel_name}")

    async def disconnect(self, close_code):
        self.registry.unbind(self.channel_name)
        logger.info(f"🔕 WebSocket disconnected - {self.channel_name} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ Invalid JSON received on {self.channel_name}")
            await self.send_json({'type': 'error', 'message': 'Invalid JSON.'})
            return

        if not isinstance(data, dict):
            await self.send_json({'type': 'error', 'message': 'Frames must be JSON objects.'})
            return

        message_type = data.get('type')

        # Heartbeat
        if message_type == 'ping':
            await self.send_json({'type': 'pong', 'timestamp': timezone.now().isoformat()})

        # Identity declaration
        elif message_type == 'join':
            await self.join(data.get('userId'))

        else:
            await self.send_json({'type': 'error', 'message': f'Unknown message type: {message_type}'})

    async def join(self, declared_user_id):
        if declared_user_id in (None, ''):
            await self.send_json({'type': 'error', 'message': 'userId is required.'})
            return

        try:
            token_user_id = read_session_token(self.session_token())
        except Unauthenticated as exc:
            logger.warning(f"⚠️ Join refused on {self.channel_name}: {exc.message}")
            await self.send_json({'type': 'error', 'message': exc.message})
            return

        if str(declared_user_id) != str(token_user_id):
            logger.warning(
                f"⚠️ Join refused on {self.channel_name}: declared {declared_user_id}, token {token_user_id}"
            )
            await self.send_json({'type': 'error', 'message': 'Declared identity does not match session.'})
            return

        self.registry.bind(self.channel_name, token_user_id)
        await self.send_json({
            'type': 'joined',
            'userId': str(token_user_id),
            'heartbeatInterval': settings.TASKFLOW_WS_HEARTBEAT_INTERVAL,
        })

    # === Channel layer handlers ===

    async def notification_dispatch(self, event):
        """Event published by NotificationFanout"""
        await self.send_json({
            'type': 'event',
            'event': event['event'],
            'payload': event['payload'],
        })

    # === Helpers ===

    def session_token(self):
        """Session token from the handshake cookies"""
        for name, value in self.scope.get('headers', []):
            if name == b'cookie':
                cookies = parse_cookie(value.decode('latin1'))
                return cookies.get(settings.TASKFLOW_SESSION_COOKIE_NAME)
        return None

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content, cls=DjangoJSONEncoder))
