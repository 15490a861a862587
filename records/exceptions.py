"""
Error taxonomy.

Services raise the classes below deliberately; ``records.handlers`` maps
each to its HTTP status and stable ``error`` code.
"""
from __future__ import annotations

from typing import Iterable

from rest_framework import exceptions, status


class Unauthenticated(exceptions.NotAuthenticated):
    default_detail = 'Authentication credentials were not provided.'
    default_code = 'not_authenticated'


class InvalidCredential(exceptions.AuthenticationFailed):
    default_detail = 'Token is invalid or expired.'
    default_code = 'invalid_credential'


class Forbidden(exceptions.PermissionDenied):
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class MissingField(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Required field missing.'
    default_code = 'missing_field'

    def __init__(self, fields: Iterable[str]):
        self.fields = sorted(fields)
        super().__init__(f"Missing required field(s): {', '.join(self.fields)}")


class InvalidValue(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid value.'
    default_code = 'invalid_value'


class NotFound(exceptions.NotFound):
    default_code = 'not_found'


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict.'
    default_code = 'conflict'
