# apps/core/models.py

from dataclasses import dataclass
from typing import Optional

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models, transaction
from django.db.models import Q
from django.utils import timezone


def normalize_email(email: str) -> str:
    """Emails are stored and compared lower-cased"""
    return (email or '').strip().lower()


class UserManager(BaseUserManager):
    """Manager for the email-based user model"""

    use_in_migrations = True

    def get_by_email(self, email: str):
        """Case-insensitive lookup; raises User.DoesNotExist"""
        return self.get(email__iexact=normalize_email(email))

    def email_taken(self, email: str) -> bool:
        return self.filter(email__iexact=normalize_email(email)).exists()

    def create_user(self, email, name, password=None, **extra_fields):
        if not email:
            raise ValueError('Users must have an email address')

        user = self.model(email=normalize_email(email), name=name, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user_with_hash(self, email, name, password_hash, **extra_fields):
        """
        Creates a user whose password was hashed ahead of time

        Used when a pending registration is confirmed: the hash was computed
        when the registration was requested and the plain password is gone.
        """
        user = self.model(
            email=normalize_email(email),
            name=name,
            password=password_hash,
            **extra_fields
        )
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if not extra_fields['is_staff'] or not extra_fields['is_superuser']:
            raise ValueError('Superuser must have is_staff=True and is_superuser=True.')

        return self.create_user(email, name, password, **extra_fields)


class User(AbstractUser):
    """
    Account identified by email

    Created only once an emailed one-time code is confirmed (see
    VerificationService); the password hash never leaves the server.
    """

    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=50, validators=[MinLengthValidator(2)])
    email = models.EmailField(unique=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'user'
        ordering = ['name']

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    def public_summary(self) -> dict:
        """Safe outward representation (never the hash)"""
        return {
            'id': str(self.pk),
            'name': self.name,
            'email': self.email,
        }

    def __str__(self):
        return f"{self.name} <{self.email}>"


class TaskQuerySet(models.QuerySet):

    def involving(self, user_id):
        """Tasks the user created or is assigned to"""
        return self.filter(
            Q(creator_id=user_id) | Q(assigned_to__id=user_id)
        ).distinct()


class Task(models.Model):
    """Unit of work owned by its creator and shared with its assignees"""

    PRIORITY_LOW = 'Low'
    PRIORITY_MEDIUM = 'Medium'
    PRIORITY_HIGH = 'High'
    PRIORITY_URGENT = 'Urgent'

    PRIORITY_CHOICES = [
        (PRIORITY_LOW, 'Low'),
        (PRIORITY_MEDIUM, 'Medium'),
        (PRIORITY_HIGH, 'High'),
        (PRIORITY_URGENT, 'Urgent'),
    ]

    STATUS_TODO = 'To Do'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_REVIEW = 'Review'
    STATUS_COMPLETED = 'Completed'

    # Any status may follow any other; the board order is a UI convention
    STATUS_CHOICES = [
        (STATUS_TODO, 'To Do'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_REVIEW, 'Review'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    title = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True)
    due_date = models.DateTimeField()
    priority = models.CharField(
        max_length=10,
        choices=PRIORITY_CHOICES,
        default=PRIORITY_MEDIUM
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_TODO,
        db_index=True
    )
    creator = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='created_tasks'
    )
    assigned_to = models.ManyToManyField(
        User,
        related_name='assigned_tasks'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TaskQuerySet.as_manager()

    class Meta:
        db_table = 'task'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['creator', 'status'], name='task_creator_2f6c1d_idx'),
            models.Index(fields=['due_date'], name='task_due_dat_8e4b7a_idx'),
        ]

    def assignee_ids(self) -> set:
        return set(self.assigned_to.values_list('id', flat=True))

    def is_overdue(self, now=None) -> bool:
        now = now or timezone.now()
        return self.due_date < now and self.status != self.STATUS_COMPLETED

    def __str__(self):
        return f"{self.title} ({self.status})"


@dataclass(frozen=True)
class PendingRegistration:
    """Registration details held until the emailed code is confirmed"""

    name: str
    password_hash: str

    def as_json(self) -> dict:
        return {'name': self.name, 'password_hash': self.password_hash}

    @classmethod
    def from_json(cls, data: dict) -> 'PendingRegistration':
        return cls(name=data['name'], password_hash=data['password_hash'])


class VerificationRecordQuerySet(models.QuerySet):

    def for_key(self, email: str, purpose: str):
        return self.filter(email=normalize_email(email), purpose=purpose)

    def live(self, now=None):
        return self.filter(expires_at__gte=now or timezone.now())

    def expired(self, now=None):
        return self.filter(expires_at__lt=now or timezone.now())

    def purge_expired(self, now=None) -> int:
        """Time-to-live sweep; returns the number of deleted records"""
        deleted, _ = self.expired(now).delete()
        return deleted


class VerificationRecordManager(models.Manager.from_queryset(VerificationRecordQuerySet)):

    def issue(self, email: str, purpose: str, otp_code: str, expires_at,
              pending: Optional[PendingRegistration] = None) -> 'VerificationRecord':
        """
        Supersedes whatever record exists for (email, purpose)

        Delete-then-insert: two concurrent callers for the same key can still
        interleave and leave two records behind until they expire.
        """
        record = self.model(
            email=normalize_email(email),
            purpose=purpose,
            otp_code=otp_code,
            expires_at=expires_at,
            pending_user_data=pending.as_json() if pending else None,
        )
        record.full_clean()

        with transaction.atomic():
            self.for_key(email, purpose).delete()
            record.save()

        return record


class VerificationRecord(models.Model):
    """
    Short-lived one-time code keyed by (email, purpose)

    REGISTER records carry the pending registration; FORGOT_PASSWORD
    records carry nothing else.
    """

    PURPOSE_REGISTER = 'REGISTER'
    PURPOSE_FORGOT_PASSWORD = 'FORGOT_PASSWORD'

    PURPOSE_CHOICES = [
        (PURPOSE_REGISTER, 'Register'),
        (PURPOSE_FORGOT_PASSWORD, 'Forgot password'),
    ]

    email = models.EmailField(db_index=True)
    otp_code = models.CharField(
        max_length=6,
        validators=[RegexValidator(r'^\d{6}$', 'Code must be 6 digits')]
    )
    purpose = models.CharField(max_length=20, choices=PURPOSE_CHOICES)
    expires_at = models.DateTimeField(db_index=True)
    pending_user_data = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = VerificationRecordManager()

    class Meta:
        db_table = 'verification_record'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email', 'purpose'], name='verificatio_email_5b1a8e_idx'),
        ]

    @property
    def pending_registration(self) -> Optional[PendingRegistration]:
        if self.purpose != self.PURPOSE_REGISTER or not self.pending_user_data:
            return None
        return PendingRegistration.from_json(self.pending_user_data)

    def is_expired(self, now=None) -> bool:
        return self.expires_at < (now or timezone.now())

    def clean(self):
        """Each purpose carries exactly its own payload"""
        if self.purpose == self.PURPOSE_REGISTER:
            data = self.pending_user_data or {}
            if not data.get('name') or not data.get('password_hash'):
                raise ValidationError("Registration codes must carry the pending user data")

        if self.purpose == self.PURPOSE_FORGOT_PASSWORD and self.pending_user_data:
            raise ValidationError("Password reset codes carry no user data")

    def __str__(self):
        return f"{self.purpose} code for {self.email}"
