# apps/tasks/views.py

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.permissions import token_required
from apps.core.utils import parse_json_body, validated

from .forms import TaskCreateForm, TaskUpdateForm
from .serializers import serialize_task
from .services import task_service


@csrf_exempt
@token_required
@require_http_methods(["GET", "POST"])
def task_collection(request):
    """
    GET: tasks the user created or is assigned to
    POST: creates a task owned by the user
    """
    if request.method == 'POST':
        form = validated(TaskCreateForm(parse_json_body(request)))
        task = task_service.create_task(form.to_data(), request.user.pk)
        return JsonResponse(serialize_task(task), status=201)

    tasks = task_service.get_tasks_for_user(request.user.pk)
    return JsonResponse([serialize_task(task) for task in tasks], safe=False)


@csrf_exempt
@token_required
@require_http_methods(["GET", "PUT", "DELETE"])
def task_detail(request, task_id):
    if request.method == 'PUT':
        form = validated(TaskUpdateForm(parse_json_body(request)))
        task = task_service.update_task(task_id, request.user.pk, form.to_patch())
        return JsonResponse(serialize_task(task))

    if request.method == 'DELETE':
        return JsonResponse(task_service.delete_task(task_id, request.user.pk))

    task = task_service.get_task_for_user(task_id, request.user.pk)
    return JsonResponse(serialize_task(task))


@token_required
@require_http_methods(["GET"])
def task_filter(request):
    """?status=&priority=&sortBy=dueDate|createdAt"""
    tasks = task_service.get_filtered_tasks(
        request.user.pk,
        status=request.GET.get('status') or None,
        priority=request.GET.get('priority') or None,
        sort=request.GET.get('sortBy') or None,
    )
    return JsonResponse([serialize_task(task) for task in tasks], safe=False)


@token_required
@require_http_methods(["GET"])
def task_dashboard(request):
    return JsonResponse(task_service.get_dashboard(request.user.pk))
