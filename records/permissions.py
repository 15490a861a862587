"""
Role gate permission classes.

``allow(*roles)`` builds a DRF permission class that admits only the
given account roles. It runs after authentication and before the view
body, so a rejected caller never reaches the database.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from rest_framework.permissions import BasePermission

from .access import roles_for
from .exceptions import Forbidden, Unauthenticated
from .models import Role


class RolePermission(BasePermission):
    """Base class; subclasses set ``allowed_roles``."""
    allowed_roles: frozenset[str] = frozenset()
    message = 'Access denied: your role is not allowed to perform this action.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, 'user', None)
        if not (user and user.is_authenticated):
            raise Unauthenticated()
        if getattr(user, 'role', None) not in self.allowed_roles:
            raise Forbidden(self.message)
        return True


def allow(*roles: Role | Iterable[Role]) -> type[RolePermission]:
    """Return a permission class admitting only ``roles``.

    Accepts individual roles or iterables of roles, so both
    ``allow(Role.ADMIN, Role.NURSE)`` and ``allow(CLINICAL)`` work.
    """
    flat: set[str] = set()
    for r in roles:
        if isinstance(r, str):
            flat.add(str(r))
        else:
            flat.update(str(x) for x in r)
    return _permission_for(frozenset(flat))


@lru_cache(maxsize=None)
def _permission_for(allowed: frozenset[str]) -> type[RolePermission]:
    name = 'Allow' + ''.join(sorted(r.title() for r in allowed))
    return type(name, (RolePermission,), {'allowed_roles': allowed})


def gate(endpoint: str) -> type[RolePermission]:
    """Permission class for a named endpoint declared in ``records.access``."""
    return allow(roles_for(endpoint))


class MethodGate(BasePermission):
    """Dispatch to the endpoint gate bound to the request method.

    Used by views that serve several endpoints on one URL, e.g.
    ``GET``/``PATCH``/``DELETE /api/patients/<id>``.
    """
    endpoints: dict[str, str] = {}

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        method = 'GET' if request.method == 'HEAD' else request.method
        endpoint = self.endpoints.get(method)
        if endpoint is None:
            # Unmapped methods still need a caller; the view then answers 405
            user = request.user
            if not (user and user.is_authenticated):
                raise Unauthenticated()
            return True
        return gate(endpoint)().has_permission(request, view)


def gate_methods(**endpoints: str) -> type[MethodGate]:
    """``gate_methods(GET='patients.get', DELETE='patients.delete')``"""
    for endpoint in endpoints.values():
        roles_for(endpoint)
    return type('MethodGate', (MethodGate,), {'endpoints': dict(endpoints)})
