"""Every endpoint rejects roles outside its allow-list before touching data."""
import datetime as dt

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from records.access import ALL_ROLES, ENDPOINT_ROLES
from records.models import (
    Appointment, AuditEvent, ClinicalNote, Patient, Role, Specialty, Staff, User,
)
from records.permissions import allow, gate

from .conftest import client_for, make_account

pytestmark = pytest.mark.django_db

SOON = (timezone.now() + dt.timedelta(days=10)).replace(microsecond=0).isoformat()

# endpoint -> (method, url template, body)
ROUTES = {
    'accounts.me': ('get', '/api/auth/me', None),
    'specialties.list': ('get', '/api/specialties', None),

    'patients.list': ('get', '/api/patients', None),
    'patients.search': ('get', '/api/patients/search/An', None),
    'patients.get': ('get', '/api/patients/{patient}', None),
    'patients.create': ('post', '/api/patients', {'name': 'Zed', 'birth_date': '2000-02-02', 'tax_id': '999'}),
    'patients.update': ('patch', '/api/patients/{patient}', {'name': 'Renamed'}),
    'patients.delete': ('delete', '/api/patients/{spare_patient}', None),

    'staff.list': ('get', '/api/staff', None),
    'staff.search': ('get', '/api/staff/search/Dr', None),
    'staff.get': ('get', '/api/staff/{staff}', None),
    'staff.create': ('post', '/api/staff', {'name': 'New', 'tax_id': 'S-999', 'role_title': 3}),
    'staff.update': ('patch', '/api/staff/{staff}', {'name': 'Renamed'}),
    'staff.delete': ('delete', '/api/staff/{spare_staff}', None),
    'staff.stats': ('get', '/api/staff/stats', None),

    'appointments.list': ('get', '/api/appointments', None),
    'appointments.get': ('get', '/api/appointments/{appointment}', None),
    'appointments.create': ('post', '/api/appointments',
                            {'patient_id': '{patient}', 'staff_id': '{staff}', 'scheduled_at': SOON, 'kind': 1}),
    'appointments.update': ('patch', '/api/appointments/{appointment}', {'description': 'moved'}),
    'appointments.delete': ('delete', '/api/appointments/{appointment}', None),
    'appointments.by_patient': ('get', '/api/appointments/patient/{patient}', None),
    'appointments.by_staff': ('get', '/api/appointments/staff/{staff}', None),

    'notes.list': ('get', '/api/clinical-notes', None),
    'notes.get': ('get', '/api/clinical-notes/{note}', None),
    'notes.create': ('post', '/api/clinical-notes', {'patient_id': '{patient}', 'staff_id': '{staff}'}),
    'notes.update': ('patch', '/api/clinical-notes/{note}', {'observations': 'edited'}),
    'notes.delete': ('delete', '/api/clinical-notes/{note}', None),
    'notes.by_patient': ('get', '/api/clinical-notes/patient/{patient}', None),
    'notes.by_staff': ('get', '/api/clinical-notes/staff/{staff}', None),
    'notes.by_appointment': ('get', '/api/clinical-notes/appointment/{appointment}', None),
    'notes.today': ('get', '/api/clinical-notes/today', None),
}

DENIED = [
    (endpoint, role)
    for endpoint, allowed in sorted(ENDPOINT_ROLES.items())
    for role in sorted(ALL_ROLES - allowed)
]


def test_every_endpoint_has_a_route_under_test():
    assert set(ROUTES) == set(ENDPOINT_ROLES)


@pytest.fixture
def world():
    specialty = Specialty.objects.create(name='Oncology')
    patient = Patient.objects.create(name='Ana', birth_date=dt.date(1990, 1, 1), tax_id='111')
    spare_patient = Patient.objects.create(name='Spare', birth_date=dt.date(1991, 1, 1), tax_id='112')
    staff = Staff.objects.create(name='Dr. Gate', tax_id='S-1', role_title=1, specialty=specialty)
    spare_staff = Staff.objects.create(name='Spare', tax_id='S-2', role_title=2)
    appointment = Appointment.objects.create(patient=patient, staff=staff, kind=1,
                                             scheduled_at=timezone.now() + dt.timedelta(days=1))
    note = ClinicalNote.objects.create(patient=patient, staff=staff, appointment=appointment, observations='x')
    return {
        'patient': patient.id, 'spare_patient': spare_patient.id, 'staff': staff.id,
        'spare_staff': spare_staff.id, 'appointment': appointment.id, 'note': note.id,
    }


def _snapshot():
    return {
        model.__name__: list(model.objects.order_by('pk').values())
        for model in (User, Specialty, Patient, Staff, Appointment, ClinicalNote, AuditEvent)
    }


def _fill(value, ids):
    if isinstance(value, str):
        return value.format(**ids) if '{' in value else value
    if isinstance(value, dict):
        return {k: _fill(v, ids) for k, v in value.items()}
    return value


@pytest.mark.parametrize('endpoint,role', DENIED)
def test_disallowed_role_is_forbidden_without_writes(world, endpoint, role):
    caller = make_account(f'{role}-caller@example.org', role)
    before = _snapshot()

    method, url, body = ROUTES[endpoint]
    kwargs = {'format': 'json'} if body is not None else {}
    if body is not None:
        kwargs['data'] = _fill(body, world)
    resp = getattr(client_for(caller), method)(url.format(**world), **kwargs)

    assert resp.status_code == 403, (endpoint, role, resp.content)
    assert resp.json() == {
        'success': False,
        'message': 'Access denied: your role is not allowed to perform this action.',
        'error': 'forbidden',
    }
    assert _snapshot() == before


@pytest.mark.parametrize('endpoint', ['patients.get', 'staff.stats', 'notes.delete'])
def test_anonymous_caller_is_unauthenticated_not_forbidden(world, endpoint):
    method, url, _ = ROUTES[endpoint]
    resp = getattr(APIClient(), method)(url.format(**world))
    assert resp.status_code == 401
    assert resp.json()['error'] == 'not_authenticated'


def test_allow_builds_one_class_per_role_set():
    assert allow(Role.ADMIN, Role.PHYSICIAN) is allow([Role.PHYSICIAN, Role.ADMIN])
    assert gate('notes.create') is allow(Role.ADMIN, Role.PHYSICIAN)
    with pytest.raises(LookupError):
        gate('notes.archive')


@pytest.mark.parametrize('url', ['/api/clinical-notes', '/api/patients/1', '/api/staff/stats'])
def test_anonymous_options_is_unauthenticated(url):
    resp = APIClient().options(url)
    assert resp.status_code == 401
    body = resp.json()
    assert body['success'] is False
    assert body['error'] == 'not_authenticated'


def test_authenticated_options_is_method_not_allowed(admin_client):
    resp = admin_client.options('/api/clinical-notes')
    assert resp.status_code == 405
    assert resp.json()['success'] is False
