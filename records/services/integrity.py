"""
Conflict and integrity checks shared by the resource services.

The ``ensure_*`` helpers are fast-path pre-checks that give the caller a
precise message. The database unique constraints remain the real
guarantee: writes run inside :func:`guarded_write`, which turns a
constraint violation raised by a concurrent request into ``Conflict``.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Optional, TypeVar

from django.contrib.auth import get_user_model
from django.db import IntegrityError, models, transaction
from django.db.models import ProtectedError

from records.exceptions import Conflict, InvalidValue, NotFound
from records.models import Appointment, ClinicalNote

logger = logging.getLogger(__name__)

User = get_user_model()

M = TypeVar('M', bound=models.Model)


@contextmanager
def guarded_write(conflict_message: str):
    """Run a write atomically, mapping store constraint violations to ``Conflict``."""
    try:
        with transaction.atomic():
            yield
    except (IntegrityError, ProtectedError) as exc:
        logger.info('write rejected by store constraint: %s', exc)
        raise Conflict(conflict_message) from exc


def ensure_exists(queryset: models.QuerySet[M] | type[M], pk, label: str) -> M:
    """Fetch ``pk`` or raise ``NotFound`` naming ``label``."""
    qs = queryset if isinstance(queryset, models.QuerySet) else queryset.objects.all()
    obj = qs.filter(pk=pk).first()
    if obj is None:
        raise NotFound(f'{label} not found')
    return obj


def ensure_unique(queryset: models.QuerySet, message: str, *, exclude_id: Optional[int] = None) -> None:
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    if queryset.exists():
        raise Conflict(message)


def ensure_no_references(checks: Iterable[tuple[models.QuerySet, str]]) -> None:
    """Raise ``Conflict`` with the first message whose queryset still has rows."""
    for queryset, message in checks:
        if queryset.exists():
            raise Conflict(message)


def ensure_slot_free(staff_id: int, scheduled_at, *, exclude_id: Optional[int] = None) -> None:
    """One appointment per staff member per timestamp."""
    ensure_unique(
        Appointment.objects.filter(staff_id=staff_id, scheduled_at=scheduled_at),
        'Staff member already has an appointment at this time',
        exclude_id=exclude_id,
    )


def ensure_note_slot_free(appointment_id: Optional[int], *, exclude_id: Optional[int] = None) -> None:
    """One clinical note per appointment; notes without an appointment never collide."""
    if appointment_id is None:
        return
    ensure_unique(
        ClinicalNote.objects.filter(appointment_id=appointment_id),
        'A clinical note already exists for this appointment',
        exclude_id=exclude_id,
    )


def resolve_account(account_id: int, *, allowed_roles: Iterable[str], related_name: str,
                    label: str, exclude_pk: Optional[int] = None):
    """Load an account that is about to be linked to a patient or staff row.

    ``related_name`` is the reverse one-to-one accessor (``patient_record``
    or ``staff_record``) used to detect an existing link.
    """
    account = User.objects.filter(pk=account_id).first()
    if account is None:
        raise NotFound('Account not found')
    allowed = set(allowed_roles)
    if account.role not in allowed:
        raise InvalidValue(
            f"account_id must reference an account with role {' or '.join(sorted(allowed))}"
        )
    # The reverse accessor raises an AttributeError subclass when unlinked
    linked = getattr(account, related_name, None)
    if linked is not None and linked.pk != exclude_pk:
        raise Conflict(f'Account is already linked to another {label} record')
    return account
