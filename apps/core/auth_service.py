# apps/core/auth_service.py

"""
Identity services

VerificationService runs the one-time-code state machine that gates
account creation and password reset; AuthenticationService covers login,
profile updates and the user directory.
"""

import logging
from typing import Dict, List, Tuple

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import transaction
from django.utils import timezone

from apps.notifications.fanout import NOTIFICATION, notification_fanout

from .emails import send_otp_email
from .exceptions import Conflict, Expired, InvalidCredential, InvalidOrExpired, NotFound, ValidationError
from .models import PendingRegistration, User, VerificationRecord, normalize_email
from .tokens import issue_session_token
from .utils import generate_otp, otp_expiry

logger = logging.getLogger(__name__)


class VerificationService:
    """
    One-time codes per (email, purpose)

    States: absent -> pending (register / forgot-password) -> absent again
    once the code is consumed. Resending replaces code and expiry in place.
    A record past `expires_at` is rejected on every path even if the
    purge command has not removed it yet.
    """

    REGISTER = VerificationRecord.PURPOSE_REGISTER
    FORGOT_PASSWORD = VerificationRecord.PURPOSE_FORGOT_PASSWORD

    def register(self, name: str, email: str, password: str) -> Dict:
        """
        Starts a registration

        Args:
            name: Display name
            email: Address that will receive the code
            password: Plain password, hashed immediately

        Returns:
            {"message", "email"}; the code itself is only echoed when
            TASKFLOW_EXPOSE_OTP is on
        """
        email = normalize_email(email)

        if User.objects.email_taken(email):
            raise Conflict('User already exists.')

        pending = PendingRegistration(name=name, password_hash=make_password(password))
        code = generate_otp()

        VerificationRecord.objects.issue(
            email,
            self.REGISTER,
            otp_code=code,
            expires_at=otp_expiry(),
            pending=pending,
        )
        logger.info(f"🔐 Registration code issued for {email}")

        self._deliver(email, code, self.REGISTER)

        return self._issued_response('Verification code sent to your email.', email, code)

    def verify_otp(self, email: str, otp: str, purpose: str = REGISTER) -> Dict:
        """
        Confirms a code

        REGISTER: creates the user from the pending data and consumes the
        record. FORGOT_PASSWORD: only checks the code; reset_password
        consumes it.
        """
        record = self._load_live_record(email, otp, purpose)

        if purpose == self.FORGOT_PASSWORD:
            return {'email': record.email, 'verified': True}

        with transaction.atomic():
            # A concurrent registration may have won the race
            if User.objects.email_taken(record.email):
                raise Conflict('User already exists.')

            pending = record.pending_registration
            if pending is None:
                raise InvalidOrExpired()

            user = User.objects.create_user_with_hash(
                email=record.email,
                name=pending.name,
                password_hash=pending.password_hash,
            )
            record.delete()

        logger.info(f"✅ Account created for {user.email} (id={user.pk})")
        return user.public_summary()

    def resend_otp(self, email: str) -> Dict:
        """New code and expiry for a pending registration; user data untouched"""
        email = normalize_email(email)

        record = VerificationRecord.objects.for_key(email, self.REGISTER).first()
        if record is None:
            raise NotFound('No pending registration for this email.')

        code = generate_otp()
        record.otp_code = code
        record.expires_at = otp_expiry()
        record.save(update_fields=['otp_code', 'expires_at', 'updated_at'])
        logger.info(f"🔁 Registration code re-issued for {email}")

        self._deliver(email, code, self.REGISTER)

        return self._issued_response('A new verification code has been sent.', email, code)

    def forgot_password(self, email: str) -> Dict:
        email = normalize_email(email)

        if not User.objects.email_taken(email):
            raise NotFound('No account found for this email.')

        code = generate_otp()
        VerificationRecord.objects.issue(
            email,
            self.FORGOT_PASSWORD,
            otp_code=code,
            expires_at=otp_expiry(),
        )
        logger.info(f"🔐 Password reset code issued for {email}")

        self._deliver(email, code, self.FORGOT_PASSWORD)

        return self._issued_response('Password reset code sent to your email.', email, code)

    def reset_password(self, email: str, otp: str, new_password: str) -> Dict:
        record = self._load_live_record(email, otp, self.FORGOT_PASSWORD)

        with transaction.atomic():
            try:
                user = User.objects.get_by_email(record.email)
            except User.DoesNotExist:
                raise NotFound('No account found for this email.')

            user.password = make_password(new_password)
            user.save(update_fields=['password'])
            record.delete()

        logger.info(f"🔑 Password reset for {user.email}")
        return {'message': 'Password reset successfully.'}

    # =================== PRIVATE METHODS ===================

    def _load_live_record(self, email: str, otp: str, purpose: str) -> VerificationRecord:
        """Exact (email, otp, purpose) match that has not expired"""
        if purpose not in (self.REGISTER, self.FORGOT_PASSWORD):
            raise ValidationError(f'Unknown verification purpose: {purpose}')

        record = (
            VerificationRecord.objects
            .for_key(email, purpose)
            .filter(otp_code=(otp or '').strip())
            .first()
        )
        if record is None:
            raise InvalidOrExpired()

        if record.is_expired():
            logger.info(f"⌛ Expired {purpose} code presented for {record.email}")
            raise Expired()

        return record

    def _deliver(self, email: str, code: str, purpose: str):
        """Best-effort: the record stands even if the email never leaves"""
        try:
            send_otp_email(email, code, purpose)
        except Exception:
            logger.exception(f"❌ Could not send {purpose} code to {email}")

    def _issued_response(self, message: str, email: str, code: str) -> Dict:
        response = {'message': message, 'email': email}
        if settings.TASKFLOW_EXPOSE_OTP:
            response['otp'] = code
        return response


class AuthenticationService:
    """Login, profile and directory operations"""

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Checks credentials and issues a session token

        Unknown email and wrong password give the same answer.
        """
        user = User.objects.filter(email__iexact=normalize_email(email)).first()

        if user is None or not user.is_active or not check_password(password, user.password):
            logger.info(f"⚠️ Failed login for {normalize_email(email)}")
            raise InvalidCredential('Invalid email or password.')

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        return issue_session_token(user.pk), user

    def update_profile(self, user: User, name: str, fanout=None) -> User:
        """Renames the user and confirms it on their live channels"""
        user.name = name
        user.save(update_fields=['name'])

        (fanout or notification_fanout).publish(
            user.pk,
            NOTIFICATION,
            {'message': 'Your profile has been updated.', 'user': user.public_summary()}
        )
        return user

    def list_users(self) -> List[Dict]:
        return [user.public_summary() for user in User.objects.filter(is_active=True)]


# Global service instances
verification_service = VerificationService()
auth_service = AuthenticationService()
