"""
Staff records and the specialty lookup.

Every clinical role reads the staff collection. A physician or nurse
reads a single staff record only when it is the one linked to their own
account, and may register that record for themselves. Changes and
removal are reserved to admins.
"""
import logging
from collections import defaultdict
from typing import Optional

from django.db.models import Q

from records.exceptions import Conflict, Forbidden
from records.models import Role, Specialty, Staff
from records.scoping import OwnershipScope
from records.services.audit import log_action
from records.services.integrity import (
    ensure_exists, ensure_no_references, ensure_unique, guarded_write, resolve_account,
)

logger = logging.getLogger(__name__)

TAX_ID_TAKEN = 'Tax id already registered for another staff member'
LICENSE_TAKEN = 'License number already registered for another staff member'
STAFF_ACCOUNT_ROLES = (Role.ADMIN, Role.PHYSICIAN, Role.NURSE)


def staff_to_dict(s: Staff) -> dict:
    return {
        'id': s.id,
        'name': s.name,
        'tax_id': s.tax_id,
        'role_title': s.role_title,
        'role_title_name': s.get_role_title_display(),
        'specialty_id': s.specialty_id,
        'specialty_name': s.specialty.name if s.specialty_id else None,
        'license_number': s.license_number,
        'account_id': s.account_id,
    }


def _staff_qs():
    return Staff.objects.select_related('specialty')


def list_staff() -> list[dict]:
    return [staff_to_dict(s) for s in _staff_qs().order_by('-id')]


def search_staff(term: str) -> list[dict]:
    term = (term or '').strip()
    qs = _staff_qs().filter(
        Q(name__icontains=term) | Q(specialty__name__icontains=term) | Q(license_number__icontains=term)
    ).order_by('name', 'id')
    return [staff_to_dict(s) for s in qs]


def get_staff(actor, staff_id: int) -> dict:
    member = ensure_exists(_staff_qs(), staff_id, 'Staff member')
    OwnershipScope.for_user(actor).ensure_staff_visible(member.id)
    return staff_to_dict(member)


def staff_stats() -> dict:
    """Head count per role title with the specialties represented in each."""
    counts: dict[int, int] = defaultdict(int)
    specialties: dict[int, set] = defaultdict(set)
    for role_title, specialty_name in _staff_qs().values_list('role_title', 'specialty__name'):
        counts[role_title] += 1
        if specialty_name:
            specialties[role_title].add(specialty_name)

    by_role = [
        {
            'role_title': value,
            'role_title_name': label,
            'count': counts[value],
            'specialties': sorted(specialties[value]),
        }
        for value, label in Staff.RoleTitle.choices
        if counts[value]
    ]
    return {'total_staff': sum(counts.values()), 'by_role_title': by_role}


def list_specialties() -> list[dict]:
    return [{'id': sp.id, 'name': sp.name} for sp in Specialty.objects.order_by('name')]


def _check_references(data: dict, *, exclude_id: Optional[int] = None) -> None:
    if data.get('specialty_id') is not None:
        ensure_exists(Specialty, data['specialty_id'], 'Specialty')
    if 'tax_id' in data:
        ensure_unique(Staff.objects.filter(tax_id=data['tax_id']), TAX_ID_TAKEN, exclude_id=exclude_id)
    if data.get('license_number'):
        ensure_unique(Staff.objects.filter(license_number=data['license_number']), LICENSE_TAKEN,
                      exclude_id=exclude_id)


def _account_for_new_staff(actor, account_id: Optional[int]):
    if actor.role in (Role.PHYSICIAN, Role.NURSE):
        if account_id is not None and account_id != actor.id:
            raise Forbidden('Access denied: you can only register your own staff record.')
        if Staff.objects.filter(account_id=actor.id).exists():
            raise Conflict('Your account already has a staff record')
        return actor
    if account_id is None:
        return None
    return resolve_account(account_id, allowed_roles=STAFF_ACCOUNT_ROLES, related_name='staff_record', label='staff')


def create_staff(actor, data: dict) -> dict:
    account = _account_for_new_staff(actor, data.get('account_id'))
    _check_references(data)

    with guarded_write('Tax id or license number already registered'):
        member = Staff.objects.create(
            name=data['name'],
            tax_id=data['tax_id'],
            role_title=data['role_title'],
            specialty_id=data.get('specialty_id'),
            license_number=data.get('license_number'),
            account=account,
        )
        log_action(user=actor, action='staff_create', object_type='staff', object_id=member.id)
    logger.info('staff %s created by account %s', member.id, actor.id)
    return staff_to_dict(_staff_qs().get(pk=member.pk))


def update_staff(actor, staff_id: int, patch: dict) -> dict:
    member = ensure_exists(Staff, staff_id, 'Staff member')
    _check_references(patch, exclude_id=member.id)

    if 'account_id' in patch:
        account_id = patch.pop('account_id')
        patch['account'] = None if account_id is None else resolve_account(
            account_id, allowed_roles=STAFF_ACCOUNT_ROLES, related_name='staff_record',
            label='staff', exclude_pk=member.id,
        )

    for field, value in patch.items():
        setattr(member, field, value)
    with guarded_write('Tax id or license number already registered'):
        member.save(update_fields=list(patch.keys()))
        log_action(user=actor, action='staff_update', object_type='staff', object_id=member.id,
                   detail={'fields': sorted(patch.keys())})
    return staff_to_dict(_staff_qs().get(pk=member.pk))


def delete_staff(actor, staff_id: int) -> str:
    member = ensure_exists(Staff, staff_id, 'Staff member')
    ensure_no_references([
        (member.appointments.all(), 'Cannot delete a staff member with registered appointments'),
        (member.clinical_notes.all(), 'Cannot delete a staff member with registered clinical notes'),
    ])
    name = member.name
    with guarded_write('Staff member is still referenced by other records'):
        member.delete()
        log_action(user=actor, action='staff_delete', object_type='staff', object_id=staff_id,
                   detail={'name': name})
    logger.info('staff %s deleted by account %s', staff_id, actor.id)
    return name
