"""
Patient records.

Clinical roles read every patient; a Patient-role account reads only the
record linked to it and may register that record itself. Only admins
change or remove patients, and removal is refused while appointments or
clinical notes still reference the patient.
"""
import logging
from typing import Optional

from django.db.models import Q

from records.exceptions import Forbidden, Conflict
from records.models import Patient, Role
from records.scoping import OwnershipScope
from records.services.audit import log_action
from records.services.integrity import (
    ensure_exists, ensure_no_references, ensure_unique, guarded_write, resolve_account,
)

logger = logging.getLogger(__name__)

TAX_ID_TAKEN = 'Tax id already registered for another patient'


def patient_to_dict(p: Patient) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'birth_date': p.birth_date.isoformat() if p.birth_date else None,
        'tax_id': p.tax_id,
        'email': p.email,
        'phone': p.phone,
        'account_id': p.account_id,
    }


def list_patients() -> list[dict]:
    return [patient_to_dict(p) for p in Patient.objects.order_by('name', 'id')]


def search_patients(term: str) -> list[dict]:
    term = (term or '').strip()
    qs = Patient.objects.filter(Q(name__icontains=term) | Q(tax_id__icontains=term)).order_by('name', 'id')
    return [patient_to_dict(p) for p in qs]


def get_patient(actor, patient_id: int) -> dict:
    patient = ensure_exists(Patient, patient_id, 'Patient')
    OwnershipScope.for_user(actor).ensure_patient_visible(patient.id)
    return patient_to_dict(patient)


def _account_for_new_patient(actor, account_id: Optional[int]):
    if actor.role == Role.PATIENT:
        if account_id is not None and account_id != actor.id:
            raise Forbidden('Access denied: you can only register your own patient record.')
        if Patient.objects.filter(account_id=actor.id).exists():
            raise Conflict('Your account already has a patient record')
        return actor
    if account_id is None:
        return None
    return resolve_account(account_id, allowed_roles=[Role.PATIENT], related_name='patient_record', label='patient')


def create_patient(actor, data: dict) -> dict:
    account = _account_for_new_patient(actor, data.get('account_id'))
    ensure_unique(Patient.objects.filter(tax_id=data['tax_id']), TAX_ID_TAKEN)

    with guarded_write(TAX_ID_TAKEN):
        patient = Patient.objects.create(
            name=data['name'],
            birth_date=data['birth_date'],
            tax_id=data['tax_id'],
            email=data.get('email'),
            phone=data.get('phone'),
            account=account,
        )
        log_action(user=actor, action='patient_create', object_type='patient', object_id=patient.id)
    logger.info('patient %s created by account %s', patient.id, actor.id)
    return patient_to_dict(patient)


def update_patient(actor, patient_id: int, patch: dict) -> dict:
    patient = ensure_exists(Patient, patient_id, 'Patient')

    if 'tax_id' in patch:
        ensure_unique(Patient.objects.filter(tax_id=patch['tax_id']), TAX_ID_TAKEN, exclude_id=patient.id)
    if 'account_id' in patch:
        account_id = patch.pop('account_id')
        patch['account'] = None if account_id is None else resolve_account(
            account_id, allowed_roles=[Role.PATIENT], related_name='patient_record',
            label='patient', exclude_pk=patient.id,
        )

    for field, value in patch.items():
        setattr(patient, field, value)
    with guarded_write(TAX_ID_TAKEN):
        patient.save(update_fields=list(patch.keys()))
        log_action(user=actor, action='patient_update', object_type='patient', object_id=patient.id,
                   detail={'fields': sorted(patch.keys())})
    patient.refresh_from_db()
    return patient_to_dict(patient)


def delete_patient(actor, patient_id: int) -> str:
    patient = ensure_exists(Patient, patient_id, 'Patient')
    ensure_no_references([
        (patient.appointments.all(), 'Cannot delete a patient with registered appointments'),
        (patient.clinical_notes.all(), 'Cannot delete a patient with registered clinical notes'),
    ])
    name = patient.name
    with guarded_write('Patient is still referenced by other records'):
        patient.delete()
        log_action(user=actor, action='patient_delete', object_type='patient', object_id=patient_id,
                   detail={'name': name})
    logger.info('patient %s deleted by account %s', patient_id, actor.id)
    return name
