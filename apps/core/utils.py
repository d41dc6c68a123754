# apps/core/utils.py

import json
import re
import secrets
from datetime import timedelta
from typing import Dict

from django.conf import settings
from django.utils import timezone

from .exceptions import ValidationError

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def generate_otp() -> str:
    """
    Random numeric code with exactly TASKFLOW_OTP_LENGTH digits
    (never starts with 0)
    """
    length = settings.TASKFLOW_OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def otp_expiry(now=None):
    """Issue time + TASKFLOW_OTP_TTL_MINUTES"""
    now = now or timezone.now()
    return now + timedelta(minutes=settings.TASKFLOW_OTP_TTL_MINUTES)


def camel_to_snake(name: str) -> str:
    """dueDate -> due_date"""
    return _CAMEL_BOUNDARY.sub('_', name).lower()


def parse_json_body(request) -> Dict:
    """
    Decodes a JSON object body with camelCase keys converted to snake_case

    Raises ValidationError when the body is not a JSON object.
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Request body must be valid JSON.')

    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')

    return {camel_to_snake(key): value for key, value in data.items()}


def isoformat(value):
    """ISO-8601 string for datetimes, None passes through"""
    if value is None:
        return None
    return value.isoformat()


def snake_to_camel(name: str) -> str:
    """due_date -> dueDate"""
    if name.startswith('_'):
        return name
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def form_errors(form) -> Dict:
    """Form errors keyed by the client's (camelCase) field names"""
    return {
        snake_to_camel(field): [error['message'] for error in errors]
        for field, errors in form.errors.get_json_data().items()
    }


def validated(form):
    """Returns the bound form or raises ValidationError with its errors"""
    if not form.is_valid():
        raise ValidationError(errors=form_errors(form))
    return form
