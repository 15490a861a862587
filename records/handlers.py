"""
Unified API exception handler.

Renders the error classes from ``records.exceptions``, and any stock
DRF/Django exception, in the response envelope with a stable ``error``
code. Anything unrecognised is logged with a reference id and returned
as a generic 500 so internal details stay server-side.

Kept apart from ``records.exceptions``: importing ``rest_framework.views``
loads the configured authentication classes, which themselves import the
error classes.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.db import IntegrityError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .exceptions import Conflict
from .responses import envelope

logger = logging.getLogger(__name__)


_CODE_ALIASES = {
    'authentication_failed': 'invalid_credential',
    'permission_denied': 'forbidden',
    'invalid': 'invalid_value',
    'parse_error': 'invalid_value',
}


_FORWARDED_HEADERS = {'www-authenticate', 'retry-after'}


def _code_for(exc: Exception) -> str:
    if isinstance(exc, Http404):
        return 'not_found'
    if isinstance(exc, exceptions.ValidationError):
        return 'invalid_value'
    code = getattr(exc, 'default_code', None) or 'error'
    return _CODE_ALIASES.get(code, code)


def _flatten(detail: Any) -> str:
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _flatten(detail['detail'])
        return '; '.join(f"{k}: {_flatten(v)}" for k, v in detail.items())
    if isinstance(detail, (list, tuple)):
        return ' '.join(_flatten(v) for v in detail)
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, (IntegrityError, ProtectedError)):
        # Store-level backstop for anything a service did not translate
        logger.warning('store constraint surfaced unmapped: %s', exc)
        exc = Conflict('The operation conflicts with existing records.')

    resp = drf_exception_handler(exc, context)
    if resp is None:
        reference = uuid.uuid4().hex[:12]
        view = context.get('view')
        logger.exception(
            'unexpected error ref=%s view=%s', reference, getattr(view, '__class__', type(None)).__name__,
            exc_info=exc,
        )
        body = envelope(False, message=f'Internal server error (reference {reference})', error='server_error')
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    body = envelope(False, message=_flatten(resp.data), error=_code_for(exc))
    headers = {k: v for k, v in resp.items() if k.lower() in _FORWARDED_HEADERS}
    return Response(body, status=resp.status_code, headers=headers)
