"""
Appointments between a patient and a staff member.

A staff member cannot be booked twice for the same timestamp. Physicians
and nurses book and reschedule only their own appointments; patients
read the appointments that reference their own patient record.
"""
import logging

from rest_framework import serializers

from records.models import Appointment, Patient, Staff
from records.scoping import OwnershipScope
from records.services.audit import log_action
from records.services.integrity import ensure_exists, ensure_slot_free, guarded_write

logger = logging.getLogger(__name__)

SLOT_TAKEN = 'Staff member already has an appointment at this time'

_datetime = serializers.DateTimeField()


def render_datetime(value):
    return _datetime.to_representation(value) if value else None


def appointment_to_dict(a: Appointment) -> dict:
    return {
        'id': a.id,
        'patient_id': a.patient_id,
        'patient_name': a.patient.name,
        'patient_tax_id': a.patient.tax_id,
        'staff_id': a.staff_id,
        'staff_name': a.staff.name,
        'staff_role_title': a.staff.get_role_title_display(),
        'specialty_name': a.staff.specialty.name if a.staff.specialty_id else None,
        'scheduled_at': render_datetime(a.scheduled_at),
        'kind': a.kind,
        'kind_name': a.get_kind_display(),
        'description': a.description,
    }


def _appointment_qs():
    return Appointment.objects.select_related('patient', 'staff', 'staff__specialty')


def _rows(qs) -> list[dict]:
    return [appointment_to_dict(a) for a in qs.order_by('-scheduled_at', '-id')]


def list_appointments() -> list[dict]:
    return _rows(_appointment_qs())


def get_appointment(actor, appointment_id: int) -> dict:
    appt = ensure_exists(_appointment_qs(), appointment_id, 'Appointment')
    OwnershipScope.for_user(actor).ensure_row_visible(
        patient_id=appt.patient_id, staff_id=appt.staff_id, what='appointments',
    )
    return appointment_to_dict(appt)


def appointments_for_patient(actor, patient_id: int) -> list[dict]:
    ensure_exists(Patient, patient_id, 'Patient')
    OwnershipScope.for_user(actor).ensure_patient_visible(patient_id)
    return _rows(_appointment_qs().filter(patient_id=patient_id))


def appointments_for_staff(actor, staff_id: int) -> list[dict]:
    ensure_exists(Staff, staff_id, 'Staff member')
    OwnershipScope.for_user(actor).ensure_staff_visible(staff_id)
    return _rows(_appointment_qs().filter(staff_id=staff_id))


def create_appointment(actor, data: dict) -> dict:
    OwnershipScope.for_user(actor).ensure_acts_as_self(data['staff_id'], 'appointments')
    ensure_exists(Patient, data['patient_id'], 'Patient')
    ensure_exists(Staff, data['staff_id'], 'Staff member')
    ensure_slot_free(data['staff_id'], data['scheduled_at'])

    with guarded_write(SLOT_TAKEN):
        appt = Appointment.objects.create(
            patient_id=data['patient_id'],
            staff_id=data['staff_id'],
            scheduled_at=data['scheduled_at'],
            kind=data['kind'],
            description=data.get('description'),
        )
        log_action(user=actor, action='appointment_create', object_type='appointment', object_id=appt.id,
                   detail={'staff_id': appt.staff_id, 'patient_id': appt.patient_id})
    logger.info('appointment %s booked for staff %s by account %s', appt.id, appt.staff_id, actor.id)
    return appointment_to_dict(_appointment_qs().get(pk=appt.pk))


def update_appointment(actor, appointment_id: int, patch: dict) -> dict:
    appt = ensure_exists(Appointment, appointment_id, 'Appointment')
    scope = OwnershipScope.for_user(actor)
    scope.ensure_acts_as_self(appt.staff_id, 'appointments')
    if 'staff_id' in patch:
        scope.ensure_acts_as_self(patch['staff_id'], 'appointments')
        ensure_exists(Staff, patch['staff_id'], 'Staff member')
    if 'patient_id' in patch:
        ensure_exists(Patient, patch['patient_id'], 'Patient')

    staff_id = patch.get('staff_id', appt.staff_id)
    scheduled_at = patch.get('scheduled_at', appt.scheduled_at)
    if 'staff_id' in patch or 'scheduled_at' in patch:
        ensure_slot_free(staff_id, scheduled_at, exclude_id=appt.id)

    for field, value in patch.items():
        setattr(appt, field, value)
    with guarded_write(SLOT_TAKEN):
        appt.save(update_fields=list(patch.keys()))
        log_action(user=actor, action='appointment_update', object_type='appointment', object_id=appt.id,
                   detail={'fields': sorted(patch.keys())})
    return appointment_to_dict(_appointment_qs().get(pk=appt.pk))


def delete_appointment(actor, appointment_id: int) -> None:
    appt = ensure_exists(Appointment, appointment_id, 'Appointment')
    with guarded_write('Appointment is still referenced by other records'):
        # The attached clinical note, if any, is kept and detached
        appt.delete()
        log_action(user=actor, action='appointment_delete', object_type='appointment', object_id=appointment_id)
    logger.info('appointment %s deleted by account %s', appointment_id, actor.id)
