"""
Bearer credential verification.

Access tokens are simplejwt HS256 tokens carrying the account id and its
role, valid for one hour from issuance (see ``SIMPLE_JWT`` in settings).
There is no refresh token; clients log in again after expiry.

The token is read from ``Authorization: Bearer <jwt>`` or, when that
header is absent, from the ``X-Auth-Token`` header used by older
clients.
"""
from __future__ import annotations

from typing import Optional

import jwt
from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.tokens import AccessToken

from .exceptions import InvalidCredential, Unauthenticated


def issue_access_token(user) -> str:
    """Sign a one-hour access token for ``user`` with its role embedded."""
    token = AccessToken.for_user(user)
    token['role'] = user.role
    token['email'] = user.email
    return str(token)


def ensure_decodable(raw_token: bytes) -> None:
    """Reject values that are not structurally a JWT; the signature is checked later."""
    try:
        jwt.decode(raw_token, options={'verify_signature': False})
    except jwt.DecodeError as exc:
        raise Unauthenticated('Malformed bearer token.') from exc


class BearerJWTAuthentication(JWTAuthentication):
    """Resolve the caller's account from a signed access token.

    A request without any token is left anonymous so that the permission
    layer answers with ``Unauthenticated``, and so does a value that is
    not a JWT at all. A well-formed token that cannot be trusted (bad
    signature, expired, unknown or inactive account, stale role) fails
    with ``InvalidCredential``.
    """

    def authenticate(self, request):
        raw_token = self._extract_raw_token(request)
        if raw_token is None:
            return None
        ensure_decodable(raw_token)
        try:
            validated_token = self.get_validated_token(raw_token)
            user = self.get_user(validated_token)
        except (InvalidToken, AuthenticationFailed) as exc:
            raise InvalidCredential() from exc
        if validated_token.get('role') != user.role:
            raise InvalidCredential('Token role does not match the account.')
        return user, validated_token

    def _extract_raw_token(self, request) -> Optional[bytes]:
        header = self.get_header(request)
        if header is not None:
            try:
                raw = self.get_raw_token(header)
            except AuthenticationFailed as exc:
                raise Unauthenticated('Malformed Authorization header.') from exc
            if raw is None:
                raise Unauthenticated('Unsupported authorization scheme; use Bearer.')
            return raw
        legacy = request.META.get(getattr(settings, 'AUTH_TOKEN_HEADER', 'HTTP_X_AUTH_TOKEN'))
        if legacy:
            return legacy.strip().encode('utf-8')
        return None
