"""
URL mappings for the records API.

Paths carry no trailing slash (``APPEND_SLASH = False``). Each URL that
serves several methods is one view gated per method; see
``records.access`` for who may call what.
"""
from django.urls import include, path

from .views import accounts, appointments, clinical_notes, health, patients, staff

urlpatterns = [
    # Accounts
    path('api/auth/signup', accounts.signup_view, name='signup_view'),
    path('api/auth/login', accounts.login_view, name='login_view'),
    path('api/auth/me', accounts.me_view, name='me_view'),

    # Patients
    path('api/patients', patients.patients_collection, name='patients'),
    path('api/patients/search/<str:term>', patients.search_patients, name='patients_search'),
    path('api/patients/<int:patient_id>', patients.patient_detail, name='patient_detail'),

    # Staff & specialties
    path('api/staff', staff.staff_collection, name='staff'),
    path('api/staff/search/<str:term>', staff.search_staff, name='staff_search'),
    path('api/staff/stats', staff.staff_stats, name='staff_stats'),
    path('api/staff/<int:staff_id>', staff.staff_detail, name='staff_detail'),
    path('api/specialties', staff.list_specialties, name='specialties'),

    # Appointments
    path('api/appointments', appointments.appointments_collection, name='appointments'),
    path('api/appointments/patient/<int:patient_id>', appointments.appointments_by_patient,
         name='appointments_by_patient'),
    path('api/appointments/staff/<int:staff_id>', appointments.appointments_by_staff,
         name='appointments_by_staff'),
    path('api/appointments/<int:appointment_id>', appointments.appointment_detail, name='appointment_detail'),

    # Clinical notes
    path('api/clinical-notes', clinical_notes.notes_collection, name='clinical_notes'),
    path('api/clinical-notes/today', clinical_notes.notes_today, name='clinical_notes_today'),
    path('api/clinical-notes/patient/<int:patient_id>', clinical_notes.notes_by_patient,
         name='clinical_notes_by_patient'),
    path('api/clinical-notes/staff/<int:staff_id>', clinical_notes.notes_by_staff,
         name='clinical_notes_by_staff'),
    path('api/clinical-notes/appointment/<int:appointment_id>', clinical_notes.note_by_appointment,
         name='clinical_note_by_appointment'),
    path('api/clinical-notes/<int:note_id>', clinical_notes.note_detail, name='clinical_note_detail'),

    # Operations
    path('healthz', health.healthz, name='healthz'),
    path('', include('django_prometheus.urls')),
]
