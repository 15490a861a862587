import pytest

from records.models import Appointment, ClinicalNote, Specialty, Staff

from .conftest import client_for, make_account

pytestmark = pytest.mark.django_db


def test_admin_creates_staff_with_display_names(admin_client, specialty):
    payload = {'name': 'Dr. Grey', 'tax_id': 'S-500', 'role_title': 1,
               'specialty_id': specialty.id, 'license_number': 'LIC-500'}
    r = admin_client.post('/api/staff', payload, format='json')
    assert r.status_code == 201
    data = r.json()['data']
    assert {k: data[k] for k in payload} == payload
    assert data['role_title_name'] == 'Physician'
    assert data['specialty_name'] == 'Cardiology'
    assert admin_client.get(f"/api/staff/{data['id']}").json()['data'] == data


def test_invalid_role_title_names_allowed_values(admin_client):
    r = admin_client.post('/api/staff', {'name': 'X', 'tax_id': 'S-1', 'role_title': 9}, format='json')
    assert r.status_code == 400
    body = r.json()
    assert body['error'] == 'invalid_value'
    assert '1-Physician, 2-Nurse, 3-Technician, 4-Administrator' in body['message']


def test_unknown_specialty_is_not_found(admin_client):
    r = admin_client.post('/api/staff', {'name': 'X', 'tax_id': 'S-1', 'role_title': 1, 'specialty_id': 404},
                          format='json')
    assert r.status_code == 404
    assert r.json()['message'] == 'Specialty not found'


def test_duplicate_license_conflicts(admin_client, physician):
    r = admin_client.post('/api/staff', {'name': 'X', 'tax_id': 'S-9', 'role_title': 1,
                                         'license_number': physician.license_number}, format='json')
    assert r.status_code == 409


def test_blank_licenses_never_collide(admin_client):
    for tax_id in ('S-7', 'S-8'):
        r = admin_client.post('/api/staff', {'name': 'Tech', 'tax_id': tax_id, 'role_title': 3,
                                             'license_number': ''}, format='json')
        assert r.status_code == 201
        assert r.json()['data']['license_number'] is None


def test_list_is_most_recent_first(admin_client, physician, other_physician, nurse):
    names = [s['name'] for s in admin_client.get('/api/staff').json()['data']]
    assert names == ['Carla', 'Dr. Wilson', 'Dr. House']


def test_search_by_specialty_or_license(physician_client, other_physician):
    assert [s['name'] for s in physician_client.get('/api/staff/search/cardio').json()['data']] == ['Dr. House']
    assert [s['name'] for s in physician_client.get('/api/staff/search/LIC-200').json()['data']] == ['Dr. Wilson']


def test_clinician_reads_only_own_staff_record(physician_client, physician, other_physician):
    assert physician_client.get(f'/api/staff/{physician.id}').status_code == 200
    r = physician_client.get(f'/api/staff/{other_physician.id}')
    assert r.status_code == 403
    assert physician_client.get('/api/staff/9999').status_code == 404


def test_admin_reads_any_staff_record(admin_client, physician, other_physician):
    assert admin_client.get(f'/api/staff/{other_physician.id}').status_code == 200


def test_physician_self_registration(physician_user):
    client = client_for(physician_user)
    r = client.post('/api/staff', {'name': 'Dr. House', 'tax_id': 'S-100', 'role_title': 1}, format='json')
    assert r.status_code == 201
    assert Staff.objects.get(pk=r.json()['data']['id']).account_id == physician_user.id
    assert client.post('/api/staff', {'name': 'Twin', 'tax_id': 'S-101', 'role_title': 1},
                       format='json').status_code == 409


def test_nurse_cannot_register_another_account(nurse_user):
    other = make_account('n2@example.org', 'nurse')
    r = client_for(nurse_user).post('/api/staff', {'name': 'N', 'tax_id': 'S-5', 'role_title': 2,
                                                  'account_id': other.id}, format='json')
    assert r.status_code == 403


def test_admin_patch_keeps_other_fields(admin_client, physician, specialty):
    r = admin_client.patch(f'/api/staff/{physician.id}', {'specialty_id': None}, format='json')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['specialty_id'] is None
    assert data['specialty_name'] is None
    assert data['license_number'] == 'LIC-100'
    assert data['name'] == 'Dr. House'


def test_update_to_taken_tax_id_conflicts(admin_client, physician, other_physician):
    r = admin_client.patch(f'/api/staff/{physician.id}', {'tax_id': other_physician.tax_id}, format='json')
    assert r.status_code == 409


def test_delete_blocked_by_notes(admin_client, physician, patient):
    ClinicalNote.objects.create(patient=patient, staff=physician, observations='ok')
    r = admin_client.delete(f'/api/staff/{physician.id}')
    assert r.status_code == 409
    assert r.json()['message'] == 'Cannot delete a staff member with registered clinical notes'


def test_delete_blocked_by_appointments(admin_client, appointment):
    r = admin_client.delete(f'/api/staff/{appointment.staff_id}')
    assert r.status_code == 409
    Appointment.objects.all().delete()
    assert admin_client.delete(f'/api/staff/{appointment.staff_id}').status_code == 200
    assert not Staff.objects.filter(pk=appointment.staff_id).exists()


def test_stats_counts_role_titles(admin_client, physician, other_physician, nurse):
    Specialty.objects.create(name='Unused')
    r = admin_client.get('/api/staff/stats')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['total_staff'] == 3
    assert data['by_role_title'] == [
        {'role_title': 1, 'role_title_name': 'Physician', 'count': 2, 'specialties': ['Cardiology']},
        {'role_title': 2, 'role_title_name': 'Nurse', 'count': 1, 'specialties': []},
    ]


def test_specialties_listed_by_name(nurse_client):
    Specialty.objects.create(name='Pediatrics')
    Specialty.objects.create(name='Anesthesiology')
    body = nurse_client.get('/api/specialties').json()
    assert [s['name'] for s in body['data']] == ['Anesthesiology', 'Pediatrics']
    assert body['total'] == 2
