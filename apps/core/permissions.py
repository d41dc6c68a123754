# apps/core/permissions.py

import logging
from functools import wraps

from django.conf import settings

from .exceptions import Forbidden, Unauthenticated
from .tokens import read_session_token

logger = logging.getLogger(__name__)


class TaskPermissions:
    """
    Ownership rules around tasks

    Only the creator may change or delete a task. Assignees can read it.
    An earlier policy let any assignee update; that variant is a bug and
    is not supported here.
    """

    @staticmethod
    def is_creator(user_id, task):
        return str(task.creator_id) == str(user_id)

    @staticmethod
    def is_assignee(user_id, task):
        return str(user_id) in {str(pk) for pk in task.assignee_ids()}

    @staticmethod
    def can_view(user_id, task):
        return TaskPermissions.is_creator(user_id, task) or TaskPermissions.is_assignee(user_id, task)

    @staticmethod
    def can_modify(user_id, task):
        return TaskPermissions.is_creator(user_id, task)

    @staticmethod
    def ensure_can_view(user_id, task):
        if not TaskPermissions.can_view(user_id, task):
            logger.warning(f"🚫 User {user_id} tried to read task {task.pk}")
            raise Forbidden('You do not have access to this task.')

    @staticmethod
    def ensure_can_modify(user_id, task, action='update'):
        if not TaskPermissions.can_modify(user_id, task):
            logger.warning(f"🚫 User {user_id} tried to {action} task {task.pk}")
            raise Forbidden(f'Only the creator can {action} the task.')


# Decorators for views

def token_required(view_func):
    """
    Requires a valid session token cookie

    Loads the user behind the token into `request.user`; a missing or bad
    cookie, or a user that no longer exists, answers 401.
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        from .models import User

        token = request.COOKIES.get(settings.TASKFLOW_SESSION_COOKIE_NAME)
        user_id = read_session_token(token)

        user = User.objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            raise Unauthenticated('Invalid or expired token.')

        request.user = user
        return view_func(request, *args, **kwargs)

    return wrapped_view
