# apps/core/emails.py

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

_SUBJECTS = {
    'REGISTER': 'Verify your email - Task Manager',
    'FORGOT_PASSWORD': 'Reset your password - Task Manager',
}

_INTROS = {
    'REGISTER': 'Use the code below to finish creating your account.',
    'FORGOT_PASSWORD': 'Use the code below to choose a new password.',
}


def send_otp_email(email: str, code: str, purpose: str):
    """
    Sends a one-time code

    Raises whatever the mail backend raises; callers decide whether a
    failed delivery matters.
    """
    minutes = settings.TASKFLOW_OTP_TTL_MINUTES
    intro = _INTROS[purpose]

    message = f"""
Hello,

{intro}

    {code}

This code expires in {minutes} minutes. If you did not ask for it, ignore this email.

Task Manager
    """

    html_message = (
        f"<p>Hello,</p>"
        f"<p>{intro}</p>"
        f"<h2 style=\"letter-spacing: 6px;\">{code}</h2>"
        f"<p>This code expires in {minutes} minutes. "
        f"If you did not ask for it, ignore this email.</p>"
    )

    send_mail(
        subject=_SUBJECTS[purpose],
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[email],
        html_message=html_message,
        fail_silently=False
    )
    logger.info(f"📧 {purpose} code sent to {email}")
