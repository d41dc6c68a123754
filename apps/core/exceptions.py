# apps/core/exceptions.py

"""
Service error taxonomy

Services raise these; ApiExceptionMiddleware turns them into JSON
responses carrying the status code and message below.
"""


class ServiceError(Exception):
    """Base class for errors reported back to the API client"""

    status_code = 400
    default_message = 'Request could not be processed.'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def as_dict(self) -> dict:
        data = {'message': self.message}
        if self.errors:
            data['errors'] = self.errors
        return data


class ValidationError(ServiceError):
    """Malformed or missing input; `errors` maps field -> messages"""

    status_code = 400
    default_message = 'Invalid input.'


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = 'Unauthorized.'


class Forbidden(ServiceError):
    status_code = 403
    default_message = 'You are not allowed to perform this action.'


class NotFound(ServiceError):
    status_code = 404
    default_message = 'Not found.'


class Conflict(ServiceError):
    status_code = 409
    default_message = 'Resource already exists.'


class Expired(ServiceError):
    status_code = 400
    default_message = 'Verification code has expired.'


class InvalidCredential(ServiceError):
    status_code = 401
    default_message = 'Invalid email or password.'


class InvalidOrExpired(InvalidCredential):
    """No live record matches the submitted one-time code"""

    status_code = 400
    default_message = 'Invalid or expired verification code.'
