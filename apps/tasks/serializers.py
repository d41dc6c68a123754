# apps/tasks/serializers.py

from typing import Dict

from apps.core.utils import isoformat


def serialize_task(task) -> Dict:
    """
    JSON-safe task snapshot

    Plain strings only, so the same dict can be returned by the API and
    pushed through any channel layer.
    """
    return {
        'id': str(task.pk),
        'title': task.title,
        'description': task.description,
        'dueDate': isoformat(task.due_date),
        'priority': task.priority,
        'status': task.status,
        'creatorId': str(task.creator_id),
        'assignedToIds': [str(pk) for pk in sorted(user.pk for user in task.assigned_to.all())],
        'createdAt': isoformat(task.created_at),
        'updatedAt': isoformat(task.updated_at),
    }
