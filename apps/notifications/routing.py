# apps/notifications/routing.py

from django.urls import re_path
from . import consumers

# WebSocket routes
websocket_urlpatterns = [
    # Per-user task notifications
    re_path(r'ws/notifications/$', consumers.NotificationConsumer.as_asgi()),
]
