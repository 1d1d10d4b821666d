import functools
from typing import Optional

from redis.exceptions import RedisError


class ServiceError(Exception):
    """Base exception for failures surfaced to API callers.

    Attributes:
        status_code: HTTP status used when rendering the envelope
        message: human readable message placed in the envelope
    """

    status_code = 500
    default_message = 'Internal error'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = 'Unauthorized'


class InvalidCredentials(ServiceError):
    status_code = 401
    default_message = 'Invalid password!'


class InvalidArgument(ServiceError):
    status_code = 400
    default_message = 'Invalid argument'


class Forbidden(ServiceError):
    status_code = 403
    default_message = 'Forbidden'


class NotFound(ServiceError):
    status_code = 404
    default_message = 'Not found'


class Conflict(ServiceError):
    status_code = 409
    default_message = 'Conflict'


class Internal(ServiceError):
    status_code = 500


def translate_store_errors(func):
    """Surface redis failures as Internal errors, without retrying."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RedisError as exc:
            raise Internal(f'Store unavailable: {exc}') from exc

    return wrapper
