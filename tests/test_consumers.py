# tests/test_consumers.py

import pytest
from asgiref.sync import async_to_sync, sync_to_async
from channels.testing import WebsocketCommunicator
from django.conf import settings

from apps.core.tokens import issue_session_token
from apps.notifications.consumers import NotificationConsumer
from apps.notifications.fanout import NOTIFICATION, notification_fanout
from apps.notifications.registry import channel_registry

# The consumer closes stale DB connections on connect and disconnect
pytestmark = pytest.mark.django_db(transaction=True)


def communicator_for(user_id=None):
    headers = []
    if user_id is not None:
        headers.append((b'cookie', f'token={issue_session_token(user_id)}'.encode()))
    return WebsocketCommunicator(NotificationConsumer.as_asgi(), '/ws/notifications/', headers=headers)


def run(scenario):
    async_to_sync(scenario)()


def test_join_binds_until_disconnect():
    async def scenario():
        communicator = communicator_for(7)
        connected, _ = await communicator.connect()
        assert connected

        await communicator.send_json_to({'type': 'join', 'userId': '7'})
        assert await communicator.receive_json_from() == {
            'type': 'joined',
            'userId': '7',
            'heartbeatInterval': settings.TASKFLOW_WS_HEARTBEAT_INTERVAL,
        }
        assert len(channel_registry.connections_for(7)) == 1

        await communicator.disconnect()
        assert channel_registry.connections_for(7) == set()

    run(scenario)


def test_join_rejected_when_declared_id_differs_from_session():
    async def scenario():
        communicator = communicator_for(7)
        await communicator.connect()

        await communicator.send_json_to({'type': 'join', 'userId': '8'})
        response = await communicator.receive_json_from()

        assert response['type'] == 'error'
        assert channel_registry.connections_for(8) == set()
        assert channel_registry.connections_for(7) == set()
        await communicator.disconnect()

    run(scenario)


def test_join_rejected_without_session_cookie():
    async def scenario():
        communicator = communicator_for()
        await communicator.connect()

        await communicator.send_json_to({'type': 'join', 'userId': '7'})
        response = await communicator.receive_json_from()

        assert response['type'] == 'error'
        assert channel_registry.connections_for(7) == set()
        await communicator.disconnect()

    run(scenario)


def test_ping_pong():
    async def scenario():
        communicator = communicator_for()
        await communicator.connect()

        await communicator.send_json_to({'type': 'ping'})
        response = await communicator.receive_json_from()

        assert response['type'] == 'pong'
        assert 'timestamp' in response
        await communicator.disconnect()

    run(scenario)


def test_invalid_frames_answer_with_error():
    async def scenario():
        communicator = communicator_for()
        await communicator.connect()

        await communicator.send_to(text_data='not json')
        assert (await communicator.receive_json_from())['type'] == 'error'

        await communicator.send_json_to({'type': 'dance'})
        assert (await communicator.receive_json_from())['type'] == 'error'
        await communicator.disconnect()

    run(scenario)


def test_published_event_is_pushed_to_joined_connection():
    async def scenario():
        communicator = communicator_for(7)
        await communicator.connect()
        await communicator.send_json_to({'type': 'join', 'userId': 7})
        await communicator.receive_json_from()

        delivered = await sync_to_async(notification_fanout.publish)(
            7, NOTIFICATION, {'message': 'Your profile has been updated.'}
        )

        assert delivered == 1
        assert await communicator.receive_json_from() == {
            'type': 'event',
            'event': NOTIFICATION,
            'payload': {'message': 'Your profile has been updated.'},
        }
        await communicator.disconnect()

    run(scenario)
