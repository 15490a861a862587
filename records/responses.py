"""JSON envelope shared by every endpoint: ``{success, data?, message?, error?, total?}``."""
from __future__ import annotations

from typing import Any, Optional, Sequence

from rest_framework import status as http
from rest_framework.response import Response


def envelope(success: bool, *, data: Any = None, message: Optional[str] = None,
             error: Optional[str] = None, total: Optional[int] = None) -> dict[str, Any]:
    body: dict[str, Any] = {'success': success}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    if error:
        body['error'] = error
    if total is not None:
        body['total'] = total
    return body


def ok(data: Any = None, *, message: Optional[str] = None, status: int = http.HTTP_200_OK) -> Response:
    return Response(envelope(True, data=data, message=message), status=status)


def created(data: Any, *, message: Optional[str] = None) -> Response:
    return ok(data, message=message, status=http.HTTP_201_CREATED)


def listing(rows: Sequence[dict], *, message: Optional[str] = None) -> Response:
    return Response(envelope(True, data=list(rows), message=message, total=len(rows)))
