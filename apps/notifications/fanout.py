# apps/notifications/fanout.py

import logging
from typing import Dict, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from .registry import ChannelRegistry, channel_registry

logger = logging.getLogger(__name__)

# Events pushed to clients
TASK_ASSIGNED = 'task.assigned'
TASK_UPDATED = 'task.updated'
TASK_DELETED = 'task.deleted'
NOTIFICATION = 'notification'

EVENT_NAMES = (TASK_ASSIGNED, TASK_UPDATED, TASK_DELETED, NOTIFICATION)

# Handler name on the consumer side (NotificationConsumer.notification_dispatch)
DISPATCH_TYPE = 'notification.dispatch'


class NotificationFanout:
    """
    Best-effort, at-most-once delivery of events to a user's connections

    No queue, no retry: a user without a bound connection simply misses
    the event. Events published from one call reach each connection in
    the order they were published.
    """

    def __init__(self, registry: Optional[ChannelRegistry] = None, channel_layer=None):
        self._registry = registry or channel_registry
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    def publish(self, target_user_id, event_name: str, payload: Dict) -> int:
        """
        Sends one event to every live connection of the user

        Returns:
            Number of connections the event was handed to
        """
        if event_name not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {event_name}")

        connections = self._registry.connections_for(target_user_id)
        if not connections:
            logger.debug(f"📭 {event_name} for user {target_user_id} dropped - no live connection")
            return 0

        message = {
            'type': DISPATCH_TYPE,
            'event': event_name,
            'payload': payload,
        }

        delivered = 0
        for channel_name in sorted(connections):
            try:
                async_to_sync(self.channel_layer.send)(channel_name, message)
                delivered += 1
            except Exception:
                # One broken connection must not starve the others
                logger.exception(f"❌ Could not push {event_name} to {channel_name}")

        logger.debug(f"📨 {event_name} -> user {target_user_id} ({delivered} connection(s))")
        return delivered


# Process-wide fan-out
notification_fanout = NotificationFanout()
