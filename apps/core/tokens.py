# apps/core/tokens.py

"""
Signed session tokens

The token is opaque to clients: a timestamped, salted signature over the
user id, carried in an http-only cookie and valid for
TASKFLOW_SESSION_MAX_AGE seconds.
"""

import logging

from django.conf import settings
from django.core import signing

from .exceptions import Unauthenticated

logger = logging.getLogger(__name__)

SESSION_TOKEN_SALT = 'apps.core.session-token'


def issue_session_token(user_id) -> str:
    """Signs `{"sub": user_id}`"""
    return signing.dumps({'sub': str(user_id)}, salt=SESSION_TOKEN_SALT, compress=True)


def read_session_token(token: str) -> str:
    """
    Returns the user id carried by the token

    Raises Unauthenticated on a missing, tampered, malformed or expired token.
    """
    if not token:
        raise Unauthenticated()

    try:
        payload = signing.loads(
            token,
            salt=SESSION_TOKEN_SALT,
            max_age=settings.TASKFLOW_SESSION_MAX_AGE
        )
    except signing.SignatureExpired:
        raise Unauthenticated('Session expired.')
    except signing.BadSignature:
        logger.warning("⚠️ Rejected session token with bad signature")
        raise Unauthenticated('Invalid or expired token.')

    user_id = payload.get('sub') if isinstance(payload, dict) else None
    if not user_id:
        raise Unauthenticated('Invalid or expired token.')

    return user_id


def set_session_cookie(response, token: str):
    response.set_cookie(
        settings.TASKFLOW_SESSION_COOKIE_NAME,
        token,
        max_age=settings.TASKFLOW_SESSION_MAX_AGE,
        httponly=True,
        secure=settings.TASKFLOW_SESSION_COOKIE_SECURE,
        samesite='Strict',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(
        settings.TASKFLOW_SESSION_COOKIE_NAME,
        samesite='Strict',
    )
    return response
