# apps/tasks/services.py

"""
Task operations

Every mutation checks ownership, persists, then fans out the matching
event to the users involved. Nothing here locks: two concurrent updates
to the same task are last-writer-wins.
"""

import logging
from typing import Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from apps.core.exceptions import NotFound, ValidationError
from apps.core.models import Task, User
from apps.core.permissions import TaskPermissions
from apps.notifications.fanout import TASK_ASSIGNED, TASK_DELETED, TASK_UPDATED

from .serializers import serialize_task

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('title', 'description', 'due_date', 'priority', 'status')

SORT_ORDERINGS = {
    'dueDate': ('due_date',),
    'createdAt': ('-created_at',),
}


class TaskService:
    """CRUD over tasks plus the notifications each mutation triggers"""

    def __init__(self, fanout=None):
        self._fanout = fanout

    @property
    def fanout(self):
        if self._fanout is None:
            from apps.notifications.fanout import notification_fanout
            self._fanout = notification_fanout
        return self._fanout

    def create_task(self, data: Dict, creator_id) -> Task:
        """
        Creates a task owned by `creator_id`

        Args:
            data: title, description, due_date, priority, assigned_to (ids)
            creator_id: Authenticated user

        Returns:
            The persisted task, assignees prefetched
        """
        assignee_ids = self._resolve_assignees(data.get('assigned_to'))

        with transaction.atomic():
            task = Task.objects.create(
                title=data['title'],
                description=data.get('description') or '',
                due_date=data['due_date'],
                priority=data['priority'],
                status=Task.STATUS_TODO,
                creator_id=creator_id,
            )
            task.assigned_to.set(assignee_ids)

        task = self._load(task.pk)
        logger.info(f"📝 Task {task.pk} created by user {creator_id}")

        snapshot = serialize_task(task)
        for user_id in sorted(assignee_ids):
            if str(user_id) == str(creator_id):
                continue
            self.fanout.publish(user_id, TASK_ASSIGNED, {
                'message': f'You have been assigned to task "{task.title}".',
                'task': snapshot,
            })

        return task

    def get_tasks_for_user(self, user_id) -> List[Task]:
        return list(self._involving(user_id))

    def get_task_for_user(self, task_id, user_id) -> Task:
        task = self._get_or_404(task_id)
        TaskPermissions.ensure_can_view(user_id, task)
        return task

    def get_filtered_tasks(self, user_id, status: Optional[str] = None,
                           priority: Optional[str] = None, sort: Optional[str] = None) -> List[Task]:
        """
        Tasks involving the user, narrowed by status and priority

        Filters match case-insensitively; `sort` is "dueDate" (earliest
        first), "createdAt" (newest first) or anything else for the
        default ordering.
        """
        tasks = self._involving(user_id)

        if status:
            tasks = tasks.filter(status__iexact=status)
        if priority:
            tasks = tasks.filter(priority__iexact=priority)

        ordering = SORT_ORDERINGS.get(sort)
        if ordering:
            tasks = tasks.order_by(*ordering)

        return list(tasks)

    def update_task(self, task_id, requester_id, patch: Dict) -> Task:
        """
        Applies a partial update (creator only)

        Args:
            task_id: Task to change
            requester_id: Authenticated user
            patch: Any subset of title, description, due_date, priority,
                status, assigned_to

        Returns:
            The updated task
        """
        task = self._get_or_404(task_id)
        TaskPermissions.ensure_can_modify(requester_id, task, action='update')

        new_assignees = None
        if 'assigned_to' in patch:
            new_assignees = self._resolve_assignees(patch['assigned_to'])

        previous = {name: getattr(task, name) for name in UPDATABLE_FIELDS}
        previous_assignees = task.assignee_ids()

        changed = [
            name for name in UPDATABLE_FIELDS
            if name in patch and patch[name] != previous[name]
        ]

        with transaction.atomic():
            for name in UPDATABLE_FIELDS:
                if name in patch:
                    value = patch[name]
                    if name == 'description' and value is None:
                        value = ''
                    setattr(task, name, value)
            task.save()

            if new_assignees is not None:
                task.assigned_to.set(new_assignees)

        task = self._load(task.pk)
        current_assignees = task.assignee_ids()
        logger.info(f"✏️ Task {task.pk} updated by user {requester_id} ({', '.join(changed) or 'no field changes'})")

        snapshot = serialize_task(task)

        for user_id in sorted(current_assignees - previous_assignees):
            if str(user_id) == str(requester_id):
                continue
            self.fanout.publish(user_id, TASK_ASSIGNED, {
                'message': f'You have been assigned to task "{task.title}".',
                'task': snapshot,
            })

        message = self._update_message(task, changed, previous['title'])
        for user_id in sorted(current_assignees):
            if str(user_id) == str(requester_id):
                continue
            self.fanout.publish(user_id, TASK_UPDATED, {
                'message': message,
                'task': snapshot,
            })

        return task

    def delete_task(self, task_id, requester_id) -> Dict:
        """Deletes the task (creator only) and tells its former assignees"""
        task = self._get_or_404(task_id)
        TaskPermissions.ensure_can_modify(requester_id, task, action='delete')

        title = task.title
        former_assignees = task.assignee_ids()
        deleted_id = str(task.pk)

        task.delete()
        logger.info(f"🗑️ Task {deleted_id} deleted by user {requester_id}")

        for user_id in sorted(former_assignees):
            if str(user_id) == str(requester_id):
                continue
            self.fanout.publish(user_id, TASK_DELETED, {
                'message': f'Task "{title}" has been deleted by the creator.',
                'taskId': deleted_id,
                'title': title,
            })

        return {'message': 'Task deleted successfully.', 'taskId': deleted_id}

    def get_dashboard(self, user_id) -> Dict:
        """
        Summary of the tasks involving the user

        Returns:
            {"totalTasks", "statusCounts": [{"status", "count"}], "overdueTasks"}
        """
        # Re-select by pk so the aggregation does not see the join duplicates
        tasks = Task.objects.filter(pk__in=Task.objects.involving(user_id).values('pk'))

        status_counts = [
            {'status': row['status'], 'count': row['count']}
            for row in tasks.values('status').annotate(count=Count('pk')).order_by('status')
        ]

        overdue = (
            tasks
            .filter(due_date__lt=timezone.now())
            .exclude(status=Task.STATUS_COMPLETED)
            .count()
        )

        return {
            'totalTasks': tasks.count(),
            'statusCounts': status_counts,
            'overdueTasks': overdue,
        }

    # =================== PRIVATE METHODS ===================

    def _involving(self, user_id):
        return Task.objects.involving(user_id).prefetch_related('assigned_to')

    def _load(self, task_id) -> Task:
        return Task.objects.prefetch_related('assigned_to').get(pk=task_id)

    def _get_or_404(self, task_id) -> Task:
        try:
            return self._load(task_id)
        except (Task.DoesNotExist, ValueError, TypeError):
            raise NotFound('Task not found.')

    def _resolve_assignees(self, assignee_ids: Optional[Iterable]) -> set:
        """Existing active user ids; an empty list is rejected"""
        requested = {str(pk) for pk in (assignee_ids or [])}
        if not requested:
            raise ValidationError(
                'A task must have at least one assignee.',
                errors={'assignedToIds': ['A task must have at least one assignee.']}
            )

        try:
            found = set(
                User.objects.filter(pk__in=requested, is_active=True).values_list('pk', flat=True)
            )
        except (ValueError, TypeError):
            found = set()

        missing = requested - {str(pk) for pk in found}
        if missing:
            raise ValidationError(
                'Unknown assignee.',
                errors={'assignedToIds': [f'User {pk} does not exist.' for pk in sorted(missing)]}
            )

        return found

    def _update_message(self, task: Task, changed: List[str], previous_title: str) -> str:
        """
        Message for the first relevant change: status, priority, title

        Quotes the title the assignees knew before this update; only the
        rename message names the new one.
        """
        if 'status' in changed:
            return f'Task "{previous_title}" status updated to {task.status}.'
        if 'priority' in changed:
            return f'Task "{previous_title}" priority changed to {task.priority}.'
        if 'title' in changed:
            return f'Task renamed to "{task.title}".'
        return f'Task "{previous_title}" has been updated.'


# Global service instance
task_service = TaskService()
