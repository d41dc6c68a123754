# apps/core/middleware.py

import logging

from django.http import Http404, JsonResponse

from .exceptions import ServiceError

logger = logging.getLogger(__name__)


class ApiExceptionMiddleware:
    """
    Turns service errors into JSON responses

    Views and services raise the exceptions from apps.core.exceptions and
    never build error responses by hand; this is the single place where
    they become `{"message": ..., "errors": ...}` with the right status.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, ServiceError):
            if exception.status_code >= 500:
                logger.error(f"❌ {request.method} {request.path}: {exception.message}")
            else:
                logger.info(
                    f"⚠️ {request.method} {request.path} -> {exception.status_code}: {exception.message}"
                )
            return JsonResponse(exception.as_dict(), status=exception.status_code)

        if isinstance(exception, Http404) and request.path.startswith('/api/'):
            return JsonResponse({'message': str(exception) or 'Not found.'}, status=404)

        # Anything else is a bug; let Django's handler log it and answer 500
        return None
