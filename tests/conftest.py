# tests/conftest.py

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.models import Task, User
from apps.notifications.fanout import NotificationFanout
from apps.notifications.registry import ChannelRegistry, channel_registry
from apps.tasks.services import TaskService
from tests.fakes import RecordingChannelLayer, RecordingFanout


# === USERS ===

@pytest.fixture
def make_user(db):
    def _make(email, name=None, password='secret123'):
        return User.objects.create_user(
            email=email,
            name=name or email.split('@')[0].title(),
            password=password,
        )
    return _make


@pytest.fixture
def alice(make_user):
    return make_user('alice@example.com', 'Alice')


@pytest.fixture
def bob(make_user):
    return make_user('bob@example.com', 'Bob')


@pytest.fixture
def carol(make_user):
    return make_user('carol@example.com', 'Carol')


# === NOTIFICATIONS ===

@pytest.fixture
def registry():
    return ChannelRegistry()


@pytest.fixture
def channel_layer():
    return RecordingChannelLayer()


@pytest.fixture
def notification_fanout(registry, channel_layer):
    return NotificationFanout(registry=registry, channel_layer=channel_layer)


@pytest.fixture
def recording_fanout():
    return RecordingFanout()


@pytest.fixture(autouse=True)
def clean_channel_registry():
    """The process-wide registry must not leak bindings between tests"""
    channel_registry.clear()
    yield
    channel_registry.clear()


# === TASKS ===

@pytest.fixture
def task_service(recording_fanout):
    return TaskService(fanout=recording_fanout)


@pytest.fixture
def task_data():
    def _data(*assignees, **overrides):
        data = {
            'title': 'Write report',
            'description': 'Quarterly numbers',
            'due_date': timezone.now() + timedelta(days=3),
            'priority': Task.PRIORITY_HIGH,
            'assigned_to': {user.pk for user in assignees},
        }
        data.update(overrides)
        return data
    return _data
