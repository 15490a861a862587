"""
Clinical notes written by a staff member about a patient.

A note may be tied to the appointment it documents; an appointment has
at most one note. Only physicians (and admins) write notes, and a
physician edits only the notes they authored.
"""
import logging
from typing import Optional

from django.utils import timezone

from records.exceptions import NotFound
from records.models import Appointment, ClinicalNote, Patient, Staff
from records.scoping import OwnershipScope
from records.services.appointments import render_datetime
from records.services.audit import log_action
from records.services.integrity import ensure_exists, ensure_note_slot_free, guarded_write

logger = logging.getLogger(__name__)

NOTE_TAKEN = 'A clinical note already exists for this appointment'


def note_to_dict(n: ClinicalNote) -> dict:
    appt: Optional[Appointment] = n.appointment
    return {
        'id': n.id,
        'patient_id': n.patient_id,
        'patient_name': n.patient.name,
        'staff_id': n.staff_id,
        'staff_name': n.staff.name,
        'specialty_name': n.staff.specialty.name if n.staff.specialty_id else None,
        'appointment_id': n.appointment_id,
        'appointment_scheduled_at': render_datetime(appt.scheduled_at) if appt else None,
        'appointment_kind_name': appt.get_kind_display() if appt else None,
        'observations': n.observations,
        'created_at': render_datetime(n.created_at),
    }


def _note_qs():
    return ClinicalNote.objects.select_related('patient', 'staff', 'staff__specialty', 'appointment')


def _rows(qs) -> list[dict]:
    return [note_to_dict(n) for n in qs.order_by('-created_at', '-id')]


def list_notes() -> list[dict]:
    return _rows(_note_qs())


def notes_created_today() -> list[dict]:
    return _rows(_note_qs().filter(created_at__date=timezone.localdate()))


def get_note(actor, note_id: int) -> dict:
    note = ensure_exists(_note_qs(), note_id, 'Clinical note')
    OwnershipScope.for_user(actor).ensure_row_visible(
        patient_id=note.patient_id, staff_id=note.staff_id, what='clinical notes',
    )
    return note_to_dict(note)


def notes_for_patient(actor, patient_id: int) -> list[dict]:
    ensure_exists(Patient, patient_id, 'Patient')
    OwnershipScope.for_user(actor).ensure_patient_visible(patient_id)
    return _rows(_note_qs().filter(patient_id=patient_id))


def notes_for_staff(actor, staff_id: int) -> list[dict]:
    ensure_exists(Staff, staff_id, 'Staff member')
    OwnershipScope.for_user(actor).ensure_staff_visible(staff_id)
    return _rows(_note_qs().filter(staff_id=staff_id))


def note_for_appointment(appointment_id: int) -> dict:
    ensure_exists(Appointment, appointment_id, 'Appointment')
    note = _note_qs().filter(appointment_id=appointment_id).first()
    if note is None:
        raise NotFound('No clinical note recorded for this appointment')
    return note_to_dict(note)


def create_note(actor, data: dict) -> dict:
    OwnershipScope.for_user(actor).ensure_acts_as_self(data['staff_id'], 'clinical notes')
    ensure_exists(Patient, data['patient_id'], 'Patient')
    ensure_exists(Staff, data['staff_id'], 'Staff member')
    appointment_id = data.get('appointment_id')
    if appointment_id is not None:
        ensure_exists(Appointment, appointment_id, 'Appointment')
        ensure_note_slot_free(appointment_id)

    with guarded_write(NOTE_TAKEN):
        note = ClinicalNote.objects.create(
            patient_id=data['patient_id'],
            staff_id=data['staff_id'],
            appointment_id=appointment_id,
            observations=data.get('observations', ''),
        )
        log_action(user=actor, action='note_create', object_type='clinical_note', object_id=note.id,
                   detail={'patient_id': note.patient_id, 'appointment_id': appointment_id})
    logger.info('clinical note %s written by staff %s', note.id, note.staff_id)
    return note_to_dict(_note_qs().get(pk=note.pk))


def update_note(actor, note_id: int, patch: dict) -> dict:
    note = ensure_exists(ClinicalNote, note_id, 'Clinical note')
    scope = OwnershipScope.for_user(actor)
    scope.ensure_acts_as_self(note.staff_id, 'clinical notes')
    if 'staff_id' in patch:
        scope.ensure_acts_as_self(patch['staff_id'], 'clinical notes')
        ensure_exists(Staff, patch['staff_id'], 'Staff member')
    if 'patient_id' in patch:
        ensure_exists(Patient, patch['patient_id'], 'Patient')
    if patch.get('appointment_id') is not None:
        ensure_exists(Appointment, patch['appointment_id'], 'Appointment')
        ensure_note_slot_free(patch['appointment_id'], exclude_id=note.id)

    for field, value in patch.items():
        setattr(note, field, value)
    with guarded_write(NOTE_TAKEN):
        note.save(update_fields=list(patch.keys()))
        log_action(user=actor, action='note_update', object_type='clinical_note', object_id=note.id,
                   detail={'fields': sorted(patch.keys())})
    return note_to_dict(_note_qs().get(pk=note.pk))


def delete_note(actor, note_id: int) -> None:
    note = ensure_exists(ClinicalNote, note_id, 'Clinical note')
    with guarded_write('Clinical note could not be deleted'):
        note.delete()
        log_action(user=actor, action='note_delete', object_type='clinical_note', object_id=note_id)
    logger.info('clinical note %s deleted by account %s', note_id, actor.id)
