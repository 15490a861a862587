import datetime as dt

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from records.authentication import issue_access_token
from records.models import Appointment, Patient, Role, Specialty, Staff, User

PASSWORD = 'Sturdy-pass-9041'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


def make_account(email: str, role: str) -> User:
    return User.objects.create_user(username=email, email=email, password=PASSWORD, role=role)


def client_for(user: User) -> APIClient:
    """Client sending a real signed bearer token for ``user``."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(user)}')
    return client


@pytest.fixture
def specialty(db):
    return Specialty.objects.create(name='Cardiology')


@pytest.fixture
def admin_user(db):
    return make_account('admin@example.org', Role.ADMIN)


@pytest.fixture
def physician_user(db):
    return make_account('physician@example.org', Role.PHYSICIAN)


@pytest.fixture
def other_physician_user(db):
    return make_account('physician2@example.org', Role.PHYSICIAN)


@pytest.fixture
def nurse_user(db):
    return make_account('nurse@example.org', Role.NURSE)


@pytest.fixture
def patient_user(db):
    return make_account('patient@example.org', Role.PATIENT)


@pytest.fixture
def other_patient_user(db):
    return make_account('patient2@example.org', Role.PATIENT)


@pytest.fixture
def physician(physician_user, specialty):
    return Staff.objects.create(
        name='Dr. House', tax_id='S-100', role_title=Staff.RoleTitle.PHYSICIAN,
        specialty=specialty, license_number='LIC-100', account=physician_user,
    )


@pytest.fixture
def other_physician(other_physician_user):
    return Staff.objects.create(
        name='Dr. Wilson', tax_id='S-200', role_title=Staff.RoleTitle.PHYSICIAN,
        license_number='LIC-200', account=other_physician_user,
    )


@pytest.fixture
def nurse(nurse_user):
    return Staff.objects.create(name='Carla', tax_id='S-300', role_title=Staff.RoleTitle.NURSE, account=nurse_user)


@pytest.fixture
def patient(patient_user):
    return Patient.objects.create(name='Ana', birth_date=dt.date(1990, 1, 1), tax_id='111', account=patient_user)


@pytest.fixture
def other_patient(other_patient_user):
    return Patient.objects.create(name='Bruno', birth_date=dt.date(1985, 6, 2), tax_id='222',
                                  account=other_patient_user)


@pytest.fixture
def slot():
    return (timezone.now() + dt.timedelta(days=3)).replace(microsecond=0)


@pytest.fixture
def appointment(patient, physician, slot):
    return Appointment.objects.create(patient=patient, staff=physician, scheduled_at=slot,
                                      kind=Appointment.Kind.IN_PERSON, description='Check-up')


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def physician_client(physician_user, physician):
    return client_for(physician_user)


@pytest.fixture
def nurse_client(nurse_user, nurse):
    return client_for(nurse_user)


@pytest.fixture
def patient_client(patient_user, patient):
    return client_for(patient_user)
