import datetime as dt

import pytest

from records.models import Appointment, ClinicalNote

from .conftest import client_for

pytestmark = pytest.mark.django_db


def iso(value):
    return value.isoformat().replace('+00:00', 'Z')


@pytest.fixture
def booking(patient, physician, slot):
    return {'patient_id': patient.id, 'staff_id': physician.id, 'scheduled_at': iso(slot), 'kind': 2,
            'description': 'Follow-up'}


def test_physician_books_own_appointment(physician_client, booking):
    r = physician_client.post('/api/appointments', booking, format='json')
    assert r.status_code == 201, r.content
    data = r.json()['data']
    assert {k: data[k] for k in booking} == booking
    assert data['kind_name'] == 'Telemedicine'
    assert data['patient_name'] == 'Ana'
    assert data['staff_name'] == 'Dr. House'
    assert data['staff_role_title'] == 'Physician'
    assert data['specialty_name'] == 'Cardiology'
    assert physician_client.get(f"/api/appointments/{data['id']}").json()['data'] == data


def test_clinician_cannot_book_for_another_staff_member(nurse_client, booking):
    r = nurse_client.post('/api/appointments', booking, format='json')
    assert r.status_code == 403
    assert Appointment.objects.count() == 0


def test_admin_books_for_anyone(admin_client, booking):
    assert admin_client.post('/api/appointments', booking, format='json').status_code == 201


def test_invalid_kind(admin_client, booking):
    r = admin_client.post('/api/appointments', {**booking, 'kind': 3}, format='json')
    assert r.status_code == 400
    assert '1-InPerson, 2-Telemedicine' in r.json()['message']


def test_unknown_patient_is_not_found(admin_client, booking):
    r = admin_client.post('/api/appointments', {**booking, 'patient_id': 5150}, format='json')
    assert r.status_code == 404
    assert r.json()['message'] == 'Patient not found'


def test_double_booking_conflicts(admin_client, booking, appointment):
    r = admin_client.post('/api/appointments', booking, format='json')
    assert r.status_code == 409
    assert r.json()['message'] == 'Staff member already has an appointment at this time'
    assert Appointment.objects.count() == 1


def test_same_slot_for_different_staff_is_fine(admin_client, booking, appointment, other_physician):
    r = admin_client.post('/api/appointments', {**booking, 'staff_id': other_physician.id}, format='json')
    assert r.status_code == 201


def test_reschedule_into_taken_slot_conflicts(physician_client, appointment, patient, physician, slot):
    later = Appointment.objects.create(patient=patient, staff=physician, kind=1,
                                       scheduled_at=slot + dt.timedelta(hours=1))
    r = physician_client.patch(f'/api/appointments/{later.id}', {'scheduled_at': iso(slot)}, format='json')
    assert r.status_code == 409


def test_update_to_own_slot_succeeds(physician_client, appointment, slot):
    r = physician_client.put(f'/api/appointments/{appointment.id}',
                             {'scheduled_at': iso(slot), 'description': 'Same time'}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['description'] == 'Same time'
    assert r.json()['data']['kind'] == 1


def test_clinician_cannot_update_foreign_appointment(admin_client, appointment, other_physician_user,
                                                       other_physician):
    r = client_for(other_physician_user).patch(f'/api/appointments/{appointment.id}', {'description': 'x'},
                                               format='json')
    assert r.status_code == 403


def test_clinician_cannot_hand_appointment_to_someone_else(physician_client, appointment, other_physician):
    r = physician_client.patch(f'/api/appointments/{appointment.id}', {'staff_id': other_physician.id},
                               format='json')
    assert r.status_code == 403
    appointment.refresh_from_db()
    assert appointment.staff_id != other_physician.id


def test_patient_sees_own_appointment(patient_client, appointment):
    r = patient_client.get(f'/api/appointments/{appointment.id}')
    assert r.status_code == 200


def test_patient_forbidden_on_foreign_appointment(appointment, other_patient_user, other_patient):
    r = client_for(other_patient_user).get(f'/api/appointments/{appointment.id}')
    assert r.status_code == 403


def test_patient_gets_not_found_for_missing_appointment(patient_client):
    assert patient_client.get('/api/appointments/31337').status_code == 404


def test_by_patient_scoping(patient_client, appointment, other_patient):
    own = patient_client.get(f'/api/appointments/patient/{appointment.patient_id}')
    assert own.status_code == 200
    assert own.json()['total'] == 1
    assert patient_client.get(f'/api/appointments/patient/{other_patient.id}').status_code == 403
    assert patient_client.get('/api/appointments/patient/8080').status_code == 404


def test_by_staff_scoping(physician_client, nurse_client, appointment, nurse):
    assert physician_client.get(f'/api/appointments/staff/{appointment.staff_id}').json()['total'] == 1
    assert nurse_client.get(f'/api/appointments/staff/{appointment.staff_id}').status_code == 403
    assert nurse_client.get(f'/api/appointments/staff/{nurse.id}').json()['total'] == 0


def test_list_newest_slot_first(admin_client, appointment, patient, physician, slot):
    newer = Appointment.objects.create(patient=patient, staff=physician, kind=1,
                                       scheduled_at=slot + dt.timedelta(days=1))
    ids = [a['id'] for a in admin_client.get('/api/appointments').json()['data']]
    assert ids == [newer.id, appointment.id]


def test_delete_detaches_clinical_note(admin_client, appointment):
    note = ClinicalNote.objects.create(patient=appointment.patient, staff=appointment.staff,
                                       appointment=appointment, observations='done')
    r = admin_client.delete(f'/api/appointments/{appointment.id}')
    assert r.status_code == 200
    note.refresh_from_db()
    assert note.appointment_id is None
    assert admin_client.delete(f'/api/appointments/{appointment.id}').status_code == 404
