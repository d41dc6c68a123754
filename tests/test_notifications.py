# tests/test_notifications.py

import pytest

from apps.notifications.fanout import (
    DISPATCH_TYPE,
    NOTIFICATION,
    TASK_ASSIGNED,
    TASK_UPDATED,
    NotificationFanout,
)
from tests.fakes import RecordingChannelLayer


class TestChannelRegistry:

    def test_bind_is_idempotent(self, registry):
        assert registry.bind('conn-1', 7) is True
        assert registry.bind('conn-1', 7) is False

        assert registry.connections_for(7) == {'conn-1'}
        assert registry.user_for('conn-1') == '7'

    def test_user_may_hold_many_connections(self, registry):
        registry.bind('tab-1', 7)
        registry.bind('tab-2', 7)

        assert registry.connections_for('7') == {'tab-1', 'tab-2'}

    def test_rebind_moves_connection(self, registry):
        registry.bind('conn-1', 7)
        registry.bind('conn-1', 8)

        assert registry.connections_for(7) == set()
        assert registry.connections_for(8) == {'conn-1'}

    def test_unbind_releases_connection(self, registry):
        registry.bind('conn-1', 7)
        registry.bind('conn-2', 7)

        assert registry.unbind('conn-1') == '7'

        assert registry.connections_for(7) == {'conn-2'}
        assert registry.user_for('conn-1') is None

    def test_unbind_unknown_connection(self, registry):
        assert registry.unbind('ghost') is None

    def test_connections_for_returns_a_snapshot(self, registry):
        registry.bind('conn-1', 7)

        snapshot = registry.connections_for(7)
        snapshot.add('intruder')

        assert registry.connections_for(7) == {'conn-1'}


class TestNotificationFanout:

    def test_publish_reaches_every_connection(self, registry, channel_layer, notification_fanout):
        registry.bind('tab-1', 7)
        registry.bind('tab-2', 7)
        registry.bind('other', 8)

        delivered = notification_fanout.publish(7, TASK_ASSIGNED, {'message': 'hi'})

        assert delivered == 2
        assert channel_layer.messages_for('tab-1') == [
            {'type': DISPATCH_TYPE, 'event': TASK_ASSIGNED, 'payload': {'message': 'hi'}}
        ]
        assert len(channel_layer.messages_for('tab-2')) == 1
        assert channel_layer.messages_for('other') == []

    def test_publish_without_binding_is_dropped(self, channel_layer, notification_fanout):
        assert notification_fanout.publish(7, NOTIFICATION, {'message': 'lost'}) == 0
        assert channel_layer.sent == []

    def test_events_keep_emission_order(self, registry, channel_layer, notification_fanout):
        registry.bind('tab-1', 7)

        notification_fanout.publish(7, TASK_ASSIGNED, {'message': 'first'})
        notification_fanout.publish(7, TASK_UPDATED, {'message': 'second'})

        assert [message['event'] for message in channel_layer.messages_for('tab-1')] == [
            TASK_ASSIGNED,
            TASK_UPDATED,
        ]

    def test_one_failing_connection_does_not_starve_the_others(self, registry):
        layer = RecordingChannelLayer(failing={'broken'})
        fanout = NotificationFanout(registry=registry, channel_layer=layer)
        registry.bind('broken', 7)
        registry.bind('healthy', 7)

        assert fanout.publish(7, NOTIFICATION, {'message': 'hi'}) == 1
        assert len(layer.messages_for('healthy')) == 1

    def test_unknown_event_is_rejected(self, notification_fanout):
        with pytest.raises(ValueError):
            notification_fanout.publish(7, 'task.exploded', {})


@pytest.mark.django_db
class TestTaskEventsThroughFanout:
    """Task service wired to a real fan-out and registry"""

    def test_assignment_reaches_only_bound_assignee(self, registry, channel_layer, notification_fanout,
                                                    task_data, alice, bob):
        from apps.tasks.services import TaskService

        registry.bind('alice-tab', alice.pk)
        registry.bind('bob-tab', bob.pk)

        TaskService(fanout=notification_fanout).create_task(task_data(alice, bob), alice.pk)

        [message] = channel_layer.messages_for('bob-tab')
        assert message['event'] == TASK_ASSIGNED
        assert 'Write report' in message['payload']['message']
        assert channel_layer.messages_for('alice-tab') == []
