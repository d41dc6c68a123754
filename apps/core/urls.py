# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTHENTICATION ===
    # Registration is two-step: register, then verify-otp
    path('api/auth/register/', views.register_view, name='register'),
    path('api/auth/verify-otp/', views.verify_otp_view, name='verify_otp'),
    path('api/auth/resend-otp/', views.resend_otp_view, name='resend_otp'),

    path('api/auth/login/', views.login_view, name='login'),
    path('api/auth/logout/', views.logout_view, name='logout'),

    # Password recovery
    path('api/auth/forgot-password/', views.forgot_password_view, name='forgot_password'),
    path('api/auth/reset-password/', views.reset_password_view, name='reset_password'),

    # === USERS ===
    path('api/users/', views.user_list, name='user_list'),
    path('api/users/me/', views.current_user, name='me'),
    path('api/users/profile/', views.update_profile, name='profile'),

    # === MONITORING ===
    path('health/', views.health_check, name='health'),
]
