# tests/test_task_service.py

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.exceptions import Forbidden, NotFound, ValidationError
from apps.core.models import Task
from apps.notifications.fanout import TASK_ASSIGNED, TASK_DELETED, TASK_UPDATED
from apps.tasks.forms import TaskCreateForm

pytestmark = pytest.mark.django_db


class TestCreateTask:

    def test_defaults_status_and_sets_creator(self, task_service, task_data, alice, bob):
        task = task_service.create_task(task_data(alice, bob), alice.pk)

        assert task.status == Task.STATUS_TODO
        assert task.creator_id == alice.pk
        assert task.assignee_ids() == {alice.pk, bob.pk}

    def test_form_requires_priority(self, bob):
        form = TaskCreateForm({
            'title': 'Write report',
            'due_date': (timezone.now() + timedelta(days=1)).isoformat(),
            'assigned_to_ids': [bob.pk],
        })

        assert not form.is_valid()
        assert list(form.errors) == ['priority']

    def test_notifies_assignees_but_not_creator(self, task_service, recording_fanout, task_data, alice, bob):
        task = task_service.create_task(task_data(alice, bob), alice.pk)

        events = recording_fanout.events_for(bob.pk)
        assert len(events) == 1
        event, payload = events[0]
        assert event == TASK_ASSIGNED
        assert payload['message'] == 'You have been assigned to task "Write report".'
        assert payload['task']['id'] == str(task.pk)
        assert recording_fanout.events_for(alice.pk) == []

    def test_rejects_empty_assignees(self, task_service, task_data, alice):
        with pytest.raises(ValidationError):
            task_service.create_task(task_data(), alice.pk)

        assert Task.objects.count() == 0

    def test_rejects_unknown_assignee(self, task_service, task_data, alice):
        data = task_data(alice)
        data['assigned_to'] = {alice.pk, 999999}

        with pytest.raises(ValidationError) as excinfo:
            task_service.create_task(data, alice.pk)

        assert 'assignedToIds' in excinfo.value.errors
        assert Task.objects.count() == 0


class TestReadTasks:

    def test_lists_created_and_assigned_tasks_once(self, task_service, task_data, alice, bob, carol):
        own = task_service.create_task(task_data(alice, bob, title='Own'), alice.pk)
        assigned = task_service.create_task(task_data(alice, title='Assigned'), bob.pk)
        task_service.create_task(task_data(carol, title='Unrelated'), carol.pk)

        tasks = task_service.get_tasks_for_user(alice.pk)

        assert sorted(task.pk for task in tasks) == sorted([own.pk, assigned.pk])

    def test_get_task_for_assignee(self, task_service, task_data, alice, bob):
        task = task_service.create_task(task_data(bob), alice.pk)

        assert task_service.get_task_for_user(task.pk, bob.pk).pk == task.pk

    def test_get_task_forbidden_for_outsider(self, task_service, task_data, alice, bob, carol):
        task = task_service.create_task(task_data(bob), alice.pk)

        with pytest.raises(Forbidden):
            task_service.get_task_for_user(task.pk, carol.pk)

    def test_get_missing_task(self, task_service, alice):
        with pytest.raises(NotFound):
            task_service.get_task_for_user(424242, alice.pk)


class TestFilteredTasks:

    @pytest.fixture
    def tasks(self, task_service, task_data, alice, bob):
        now = timezone.now()
        first = task_service.create_task(
            task_data(bob, title='Later', priority=Task.PRIORITY_LOW, due_date=now + timedelta(days=5)),
            alice.pk,
        )
        second = task_service.create_task(
            task_data(bob, title='Sooner', priority=Task.PRIORITY_HIGH, due_date=now + timedelta(days=1)),
            alice.pk,
        )
        task_service.update_task(second.pk, alice.pk, {'status': Task.STATUS_REVIEW})
        return first, second

    def test_status_filter_is_case_insensitive(self, task_service, tasks, bob):
        _, second = tasks

        result = task_service.get_filtered_tasks(bob.pk, status='review')

        assert [task.pk for task in result] == [second.pk]

    def test_priority_filter(self, task_service, tasks, bob):
        first, _ = tasks

        result = task_service.get_filtered_tasks(bob.pk, priority='LOW')

        assert [task.pk for task in result] == [first.pk]

    def test_sort_by_due_date_ascending(self, task_service, tasks, bob):
        first, second = tasks

        result = task_service.get_filtered_tasks(bob.pk, sort='dueDate')

        assert [task.pk for task in result] == [second.pk, first.pk]

    def test_sort_by_created_at_descending(self, task_service, tasks, bob):
        first, second = tasks
        Task.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(hours=1))

        result = task_service.get_filtered_tasks(bob.pk, sort='createdAt')

        assert [task.pk for task in result] == [second.pk, first.pk]

    def test_outsider_sees_nothing(self, task_service, tasks, carol):
        assert task_service.get_filtered_tasks(carol.pk) == []


class TestUpdateTask:

    def test_status_change_notifies_other_assignees(self, task_service, recording_fanout, task_data, alice, bob):
        task = task_service.create_task(task_data(alice, bob), alice.pk)
        recording_fanout.clear()

        updated = task_service.update_task(task.pk, alice.pk, {'status': Task.STATUS_COMPLETED})

        assert updated.status == Task.STATUS_COMPLETED
        events = recording_fanout.events_for(bob.pk)
        assert len(events) == 1
        event, payload = events[0]
        assert event == TASK_UPDATED
        assert 'status updated to Completed' in payload['message']
        assert payload['task']['status'] == Task.STATUS_COMPLETED
        assert recording_fanout.events_for(alice.pk) == []

    @pytest.mark.parametrize('patch, message', [
        ({'status': 'Review', 'priority': 'Low', 'title': 'New'}, 'Task "Write report" status updated to Review.'),
        ({'priority': 'Low', 'title': 'New'}, 'Task "Write report" priority changed to Low.'),
        ({'title': 'New'}, 'Task renamed to "New".'),
        ({'description': 'Other'}, 'Task "Write report" has been updated.'),
    ])
    def test_message_follows_first_changed_field(self, task_service, recording_fanout, task_data,
                                                 alice, bob, patch, message):
        task = task_service.create_task(task_data(bob), alice.pk)
        recording_fanout.clear()

        task_service.update_task(task.pk, alice.pk, patch)

        [(event, payload)] = recording_fanout.events_for(bob.pk)
        assert payload['message'] == message

    def test_rename_with_status_change_quotes_previous_title(self, task_service, recording_fanout, task_data,
                                                             alice, bob):
        task = task_service.create_task(task_data(bob), alice.pk)
        recording_fanout.clear()

        task_service.update_task(task.pk, alice.pk, {'title': 'Final report', 'status': Task.STATUS_REVIEW})

        [(_, payload)] = recording_fanout.events_for(bob.pk)
        assert payload['message'] == 'Task "Write report" status updated to Review.'
        assert payload['task']['title'] == 'Final report'

    def test_unchanged_status_is_not_a_status_change(self, task_service, recording_fanout, task_data, alice, bob):
        task = task_service.create_task(task_data(bob), alice.pk)
        recording_fanout.clear()

        task_service.update_task(task.pk, alice.pk, {'status': Task.STATUS_TODO, 'title': 'Renamed'})

        [(_, payload)] = recording_fanout.events_for(bob.pk)
        assert payload['message'] == 'Task renamed to "Renamed".'

    def test_new_assignee_gets_assigned_then_updated(self, task_service, recording_fanout, task_data,
                                                     alice, bob, carol):
        task = task_service.create_task(task_data(bob), alice.pk)
        recording_fanout.clear()

        task_service.update_task(task.pk, alice.pk, {'assigned_to': {bob.pk, carol.pk}})

        assert [event for event, _ in recording_fanout.events_for(carol.pk)] == [TASK_ASSIGNED, TASK_UPDATED]
        assert [event for event, _ in recording_fanout.events_for(bob.pk)] == [TASK_UPDATED]

    def test_removed_assignee_is_not_notified(self, task_service, recording_fanout, task_data, alice, bob, carol):
        task = task_service.create_task(task_data(bob, carol), alice.pk)
        recording_fanout.clear()

        updated = task_service.update_task(task.pk, alice.pk, {'assigned_to': {bob.pk}})

        assert updated.assignee_ids() == {bob.pk}
        assert recording_fanout.events_for(carol.pk) == []

    def test_empty_assignees_rejected_before_persistence(self, task_service, task_data, alice, bob):
        task = task_service.create_task(task_data(bob), alice.pk)

        with pytest.raises(ValidationError):
            task_service.update_task(task.pk, alice.pk, {'title': 'Changed', 'assigned_to': set()})

        task.refresh_from_db()
        assert task.title == 'Write report'
        assert task.assignee_ids() == {bob.pk}

    def test_assignee_cannot_update(self, task_service, recording_fanout, task_data, alice, bob):
        task = task_service.create_task(task_data(bob), alice.pk)
        recording_fanout.clear()

        with pytest.raises(Forbidden):
            task_service.update_task(task.pk, bob.pk, {'status': Task.STATUS_COMPLETED})

        task.refresh_from_db()
        assert task.status == Task.STATUS_TODO
        assert recording_fanout.published == []

    def test_missing_task(self, task_service, alice):
        with pytest.raises(NotFound):
            task_service.update_task(424242, alice.pk, {'title': 'Nope'})


class TestDeleteTask:

    def test_creator_deletes_and_assignees_are_told(self, task_service, recording_fanout, task_data, alice, bob):
        task = task_service.create_task(task_data(alice, bob), alice.pk)
        task_id = task.pk
        recording_fanout.clear()

        result = task_service.delete_task(task_id, alice.pk)

        assert result['taskId'] == str(task_id)
        [(event, payload)] = recording_fanout.events_for(bob.pk)
        assert event == TASK_DELETED
        assert payload['taskId'] == str(task_id)
        assert payload['title'] == 'Write report'
        assert payload['message'] == 'Task "Write report" has been deleted by the creator.'
        assert recording_fanout.events_for(alice.pk) == []
        assert task_service.get_tasks_for_user(bob.pk) == []

    def test_assignee_cannot_delete(self, task_service, task_data, alice, bob):
        task = task_service.create_task(task_data(bob), alice.pk)

        with pytest.raises(Forbidden) as excinfo:
            task_service.delete_task(task.pk, bob.pk)

        assert excinfo.value.message == 'Only the creator can delete the task.'
        assert Task.objects.filter(pk=task.pk).exists()


class TestDashboard:

    def test_counts_and_overdue(self, task_service, task_data, alice, bob):
        past = timezone.now() - timedelta(days=1)
        overdue = task_service.create_task(task_data(bob, title='Late', due_date=past), alice.pk)
        done = task_service.create_task(task_data(bob, title='Late but done', due_date=past), alice.pk)
        task_service.create_task(task_data(bob, title='Upcoming'), alice.pk)
        task_service.update_task(done.pk, alice.pk, {'status': Task.STATUS_COMPLETED})

        dashboard = task_service.get_dashboard(bob.pk)

        assert dashboard['totalTasks'] == 3
        assert dashboard['overdueTasks'] == 1
        assert dashboard['statusCounts'] == [
            {'status': Task.STATUS_COMPLETED, 'count': 1},
            {'status': Task.STATUS_TODO, 'count': 2},
        ]
        assert overdue.is_overdue()

    def test_creator_and_assignee_counted_once(self, task_service, task_data, alice, bob):
        task_service.create_task(task_data(alice, bob), alice.pk)

        dashboard = task_service.get_dashboard(alice.pk)

        assert dashboard['totalTasks'] == 1
        assert dashboard['statusCounts'] == [{'status': Task.STATUS_TODO, 'count': 1}]

    def test_empty(self, task_service, carol):
        assert task_service.get_dashboard(carol.pk) == {
            'totalTasks': 0,
            'statusCounts': [],
            'overdueTasks': 0,
        }
