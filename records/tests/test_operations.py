import pytest
from django.conf import settings
from django.core.management import call_command
from django.test import Client
from rest_framework.test import APIClient

from records import handlers
from records.models import Patient, Role, Specialty, Staff, User
from records.services import patients as patient_service

pytestmark = pytest.mark.django_db


def test_healthz_reports_database():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'success': True, 'data': {'db': True}}


def test_metrics_are_exposed():
    r = APIClient().get('/metrics')
    assert r.status_code == 200
    assert b'django_http_requests' in r.content


def test_unexpected_error_hides_cause(admin_client, monkeypatch):
    logged = []

    def boom():
        raise RuntimeError('db password is hunter2')

    monkeypatch.setattr(patient_service, 'list_patients', boom)
    monkeypatch.setattr(handlers.logger, 'exception', lambda *args, **kwargs: logged.append((args, kwargs)))
    r = admin_client.get('/api/patients')
    assert r.status_code == 500
    body = r.json()
    assert body['error'] == 'server_error'
    assert body['message'].startswith('Internal server error (reference ')
    assert 'hunter2' not in body['message']
    reference = body['message'].split('reference ')[1].rstrip(')')
    (args, kwargs), = logged
    assert args[1] == reference
    assert 'hunter2' in str(kwargs['exc_info'])


def test_malformed_json_is_invalid_value(admin_client):
    r = admin_client.post('/api/patients', data='{"name":', content_type='application/json')
    assert r.status_code == 400
    assert r.json()['error'] == 'invalid_value'


def test_unsupported_method_keeps_envelope(admin_client):
    r = admin_client.delete('/api/patients')
    assert r.status_code == 405
    assert r.json()['success'] is False


def test_seed_demo_is_idempotent():
    call_command('seed_demo')
    call_command('seed_demo')
    assert Specialty.objects.filter(name='Cardiology').count() == 1
    assert set(User.objects.values_list('role', flat=True)) == {Role.ADMIN, Role.PHYSICIAN, Role.NURSE, Role.PATIENT}
    assert Staff.objects.filter(account__email='physician@demo.local').count() == 1
    assert Patient.objects.filter(account__email='patient@demo.local').count() == 1


def test_seed_demo_accounts_can_log_in():
    call_command('seed_demo', '--password', 'Another-pass-771')
    r = APIClient().post('/api/auth/login', {'email': 'nurse@demo.local', 'password': 'Another-pass-771'},
                         format='json')
    assert r.status_code == 200
    assert r.json()['data']['user']['staff_id'] is not None


def test_exception_handler_lives_outside_the_error_taxonomy():
    assert settings.REST_FRAMEWORK['EXCEPTION_HANDLER'] == 'records.handlers.api_exception_handler'
    call_command('check')


def test_plain_client_gets_envelope_on_first_request():
    r = Client().get('/api/patients')
    assert r.status_code == 401
    body = r.json()
    assert body['success'] is False
    assert body['error'] == 'not_authenticated'
