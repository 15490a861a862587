"""
Database models for the hospital records API.

Accounts carry one of four fixed roles. Patient and staff rows are the
administrative records; an account is linked to at most one of them
through the explicit ``account`` one-to-one key, which is what every
ownership check resolves against. Appointments and clinical notes
reference patients and staff and are never embedded in them.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    PHYSICIAN = 'physician', 'Physician'
    NURSE = 'nurse', 'Nurse'
    PATIENT = 'patient', 'Patient'


class User(AbstractUser):
    """Login account identified by email.

    The role is chosen at signup and never changes afterwards; there is
    no endpoint that edits it.
    """
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PATIENT)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    def save(self, *args, **kwargs):
        # Login matches the stored email exactly
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Specialty(models.Model):
    """Lookup table of medical specialties."""
    name = models.CharField(max_length=128, unique=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'specialties'

    def __str__(self) -> str:
        return self.name


class Patient(models.Model):
    name = models.CharField(max_length=255, db_index=True)
    birth_date = models.DateField()
    tax_id = models.CharField(max_length=32, unique=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    account = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='patient_record'
    )

    def __str__(self) -> str:
        return f"{self.name} ({self.tax_id})"


class Staff(models.Model):
    """A professional working at the hospital.

    ``role_title`` is the job title kept on the record and is distinct
    from the account role used for authorization.
    """
    class RoleTitle(models.IntegerChoices):
        PHYSICIAN = 1, 'Physician'
        NURSE = 2, 'Nurse'
        TECHNICIAN = 3, 'Technician'
        ADMINISTRATOR = 4, 'Administrator'

    name = models.CharField(max_length=255, db_index=True)
    tax_id = models.CharField(max_length=32, unique=True)
    role_title = models.PositiveSmallIntegerField(choices=RoleTitle.choices)
    specialty = models.ForeignKey(
        Specialty, null=True, blank=True, on_delete=models.PROTECT, related_name='staff'
    )
    license_number = models.CharField(max_length=64, unique=True, null=True, blank=True)
    account = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='staff_record'
    )

    class Meta:
        verbose_name_plural = 'staff'

    def __str__(self) -> str:
        return f"{self.name} ({self.get_role_title_display()})"


class Appointment(models.Model):
    class Kind(models.IntegerChoices):
        IN_PERSON = 1, 'InPerson'
        TELEMEDICINE = 2, 'Telemedicine'

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    staff = models.ForeignKey(Staff, on_delete=models.PROTECT, related_name='appointments')
    scheduled_at = models.DateTimeField(db_index=True)
    kind = models.PositiveSmallIntegerField(choices=Kind.choices)
    description = models.TextField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['staff', 'scheduled_at'], name='uniq_appointment_staff_slot'),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.id} staff={self.staff_id} @ {self.scheduled_at:%F %T}"


class ClinicalNote(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='clinical_notes')
    staff = models.ForeignKey(Staff, on_delete=models.PROTECT, related_name='clinical_notes')
    # At most one note per appointment; NULLs do not collide
    appointment = models.OneToOneField(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='clinical_note'
    )
    observations = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def __str__(self) -> str:
        return f"Note #{self.id} patient={self.patient_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.object_type}#{self.object_id}"
