"""
Per-endpoint role allow-lists.

Every gated endpoint is declared here exactly once, keyed by
``"<resource>.<operation>"``. Views never spell out roles themselves;
they ask :func:`records.permissions.gate` for the permission class bound
to their endpoint name.
"""
from __future__ import annotations

from typing import Mapping

from .models import Role

ADMIN = Role.ADMIN
PHYSICIAN = Role.PHYSICIAN
NURSE = Role.NURSE
PATIENT = Role.PATIENT

ALL_ROLES: frozenset[Role] = frozenset(Role)
CLINICAL: frozenset[Role] = frozenset({ADMIN, PHYSICIAN, NURSE})
ADMIN_ONLY: frozenset[Role] = frozenset({ADMIN})

# Roles that see every row of every collection
GLOBAL_VISIBILITY: frozenset[Role] = frozenset({ADMIN})

ENDPOINT_ROLES: Mapping[str, frozenset[Role]] = {
    'accounts.me': ALL_ROLES,
    'specialties.list': CLINICAL,

    'patients.list': CLINICAL,
    'patients.search': CLINICAL,
    'patients.get': ALL_ROLES,
    'patients.create': frozenset({ADMIN, PATIENT}),
    'patients.update': ADMIN_ONLY,
    'patients.delete': ADMIN_ONLY,

    'staff.list': CLINICAL,
    'staff.search': CLINICAL,
    'staff.get': CLINICAL,
    'staff.create': CLINICAL,
    'staff.update': ADMIN_ONLY,
    'staff.delete': ADMIN_ONLY,
    'staff.stats': ADMIN_ONLY,

    'appointments.list': CLINICAL,
    'appointments.get': ALL_ROLES,
    'appointments.create': CLINICAL,
    'appointments.update': CLINICAL,
    'appointments.delete': ADMIN_ONLY,
    'appointments.by_patient': ALL_ROLES,
    'appointments.by_staff': CLINICAL,

    'notes.list': CLINICAL,
    'notes.get': ALL_ROLES,
    'notes.create': frozenset({ADMIN, PHYSICIAN}),
    'notes.update': frozenset({ADMIN, PHYSICIAN}),
    'notes.delete': ADMIN_ONLY,
    'notes.by_patient': ALL_ROLES,
    'notes.by_staff': CLINICAL,
    'notes.by_appointment': CLINICAL,
    'notes.today': CLINICAL,
}


def roles_for(endpoint: str) -> frozenset[Role]:
    try:
        return ENDPOINT_ROLES[endpoint]
    except KeyError:
        raise LookupError(f'no allow-list declared for endpoint {endpoint!r}') from None
