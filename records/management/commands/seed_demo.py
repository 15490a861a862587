# records/management/commands/seed_demo.py
from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction

from records.models import Patient, Role, Specialty, Staff, User

SPECIALTIES = ['Cardiology', 'Dermatology', 'General Practice', 'Pediatrics']

# (email, role)
DEMO_ACCOUNTS = [
    ('admin@demo.local', Role.ADMIN),
    ('physician@demo.local', Role.PHYSICIAN),
    ('nurse@demo.local', Role.NURSE),
    ('patient@demo.local', Role.PATIENT),
]


class Command(BaseCommand):
    help = "Ensure specialties and one demo account per role exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--password', default='demo-Pass-2024', help='Password set on every demo account.')

    @transaction.atomic
    def handle(self, *args, **opts):
        for name in SPECIALTIES:
            Specialty.objects.get_or_create(name=name)
        cardiology = Specialty.objects.get(name='Cardiology')

        accounts = {}
        for email, role in DEMO_ACCOUNTS:
            user, created = User.objects.get_or_create(
                email=email, defaults={'username': email, 'role': role, 'is_active': True},
            )
            # Reset password, role and activation on every run
            user.set_password(opts['password'])
            user.role = role
            user.is_active = True
            user.save()
            accounts[role] = user
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({role})"))

        Staff.objects.get_or_create(
            account=accounts[Role.PHYSICIAN],
            defaults={'name': 'Demo Physician', 'tax_id': 'DEMO-STAFF-1',
                      'role_title': Staff.RoleTitle.PHYSICIAN, 'specialty': cardiology,
                      'license_number': 'DEMO-LIC-1'},
        )
        Staff.objects.get_or_create(
            account=accounts[Role.NURSE],
            defaults={'name': 'Demo Nurse', 'tax_id': 'DEMO-STAFF-2', 'role_title': Staff.RoleTitle.NURSE},
        )
        Patient.objects.get_or_create(
            account=accounts[Role.PATIENT],
            defaults={'name': 'Demo Patient', 'birth_date': date(1990, 1, 1), 'tax_id': 'DEMO-PATIENT-1'},
        )
        self.stdout.write(self.style.SUCCESS("Demo data ensured."))
