# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import BaseUserCreationForm, UserChangeForm
from django.utils import timezone
from django.utils.html import format_html

from .models import Task, User, VerificationRecord


class UserCreationAdminForm(BaseUserCreationForm):

    class Meta:
        model = User
        fields = ('email', 'name')


class UserChangeAdminForm(UserChangeForm):

    class Meta:
        model = User
        fields = '__all__'


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for the email-identified user model"""

    form = UserChangeAdminForm
    add_form = UserCreationAdminForm

    list_display = ['email', 'name', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['email', 'name']
    ordering = ['name']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('name',)}),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin for tasks"""

    list_display = [
        'title', 'creator', 'priority_badge', 'status',
        'due_date', 'assignees_count', 'created_at'
    ]
    list_filter = ['status', 'priority', 'due_date']
    search_fields = ['title', 'description', 'creator__email']
    filter_horizontal = ['assigned_to']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Task', {
            'fields': ('title', 'description', 'priority', 'status', 'due_date')
        }),
        ('People', {
            'fields': ('creator', 'assigned_to')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def priority_badge(self, obj):
        """Priority with a coloured badge"""
        colors = {
            Task.PRIORITY_LOW: '#6B7280',  # grey
            Task.PRIORITY_MEDIUM: '#3B82F6',  # blue
            Task.PRIORITY_HIGH: '#F59E0B',  # yellow
            Task.PRIORITY_URGENT: '#EF4444',  # red
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            colors.get(obj.priority, '#6B7280'), obj.get_priority_display()
        )

    priority_badge.short_description = 'Priority'

    def assignees_count(self, obj):
        return obj.assigned_to.count()

    assignees_count.short_description = 'Assignees'


@admin.register(VerificationRecord)
class VerificationRecordAdmin(admin.ModelAdmin):
    """Pending one-time codes (read-only)"""

    list_display = ['email', 'purpose', 'expires_at', 'is_live', 'created_at']
    list_filter = ['purpose']
    search_fields = ['email']
    readonly_fields = [
        'email', 'otp_code', 'purpose', 'expires_at',
        'pending_user_data', 'created_at', 'updated_at'
    ]

    def has_add_permission(self, request):
        return False

    def is_live(self, obj):
        return not obj.is_expired(timezone.now())

    is_live.boolean = True
    is_live.short_description = 'Live'
