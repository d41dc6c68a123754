# apps/core/views.py

import logging

from django.core.cache import cache
from django.db import DatabaseError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .auth_service import auth_service, verification_service
from .forms import EmailForm, LoginForm, ProfileForm, RegisterForm, ResetPasswordForm, VerifyOtpForm
from .models import User
from .permissions import token_required
from .tokens import clear_session_cookie, set_session_cookie
from .utils import parse_json_body, validated

logger = logging.getLogger(__name__)


# === AUTHENTICATION ===

@csrf_exempt
@require_http_methods(["POST"])
def register_view(request):
    """Starts a registration; the account is created by verify-otp"""
    form = validated(RegisterForm(parse_json_body(request)))
    result = verification_service.register(**form.cleaned_data)
    return JsonResponse(result, status=201)


@csrf_exempt
@require_http_methods(["POST"])
def verify_otp_view(request):
    form = validated(VerifyOtpForm(parse_json_body(request)))
    result = verification_service.verify_otp(**form.cleaned_data)

    if form.cleaned_data['purpose'] == verification_service.REGISTER:
        return JsonResponse({'message': 'Account verified successfully.', 'user': result}, status=201)
    return JsonResponse(result)


@csrf_exempt
@require_http_methods(["POST"])
def resend_otp_view(request):
    form = validated(EmailForm(parse_json_body(request)))
    return JsonResponse(verification_service.resend_otp(form.cleaned_data['email']))


@csrf_exempt
@require_http_methods(["POST"])
def login_view(request):
    """
    Checks credentials and sets the session cookie

    The token itself never appears in the body; clients only see the
    http-only cookie.
    """
    form = validated(LoginForm(parse_json_body(request)))
    token, user = auth_service.login(**form.cleaned_data)

    response = JsonResponse({'message': 'Login successful.', 'user': user.public_summary()})
    return set_session_cookie(response, token)


@csrf_exempt
@token_required
@require_http_methods(["POST"])
def logout_view(request):
    logger.info(f"👋 User {request.user.pk} logged out")
    return clear_session_cookie(JsonResponse({'message': 'Logged out successfully.'}))


@csrf_exempt
@require_http_methods(["POST"])
def forgot_password_view(request):
    form = validated(EmailForm(parse_json_body(request)))
    return JsonResponse(verification_service.forgot_password(form.cleaned_data['email']))


@csrf_exempt
@require_http_methods(["POST"])
def reset_password_view(request):
    form = validated(ResetPasswordForm(parse_json_body(request)))
    return JsonResponse(verification_service.reset_password(**form.cleaned_data))


# === USERS ===

@token_required
@require_http_methods(["GET"])
def user_list(request):
    """Directory used to pick assignees"""
    return JsonResponse(auth_service.list_users(), safe=False)


@token_required
@require_http_methods(["GET"])
def current_user(request):
    return JsonResponse(request.user.public_summary())


@csrf_exempt
@token_required
@require_http_methods(["PUT"])
def update_profile(request):
    form = validated(ProfileForm(parse_json_body(request)))
    user = auth_service.update_profile(request.user, form.cleaned_data['name'])
    return JsonResponse({'message': 'Profile updated successfully.', 'user': user.public_summary()})


# === MONITORING ===

@require_http_methods(["GET"])
def health_check(request):
    """
    Health check for monitoring
    """
    try:
        # Database connection
        User.objects.exists()

        # Cache (Redis when configured)
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

    except DatabaseError as e:
        logger.exception("❌ Health check failed")
        return JsonResponse({
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
        }, status=503)

    return JsonResponse({
        'status': 'ok',
        'database': 'ok',
        'cache': 'ok',
        'timestamp': timezone.now().isoformat(),
    })
