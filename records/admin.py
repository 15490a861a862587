"""
Django admin registrations for the records models.

Superusers can inspect and correct data through ``/admin/``. Clinical
note text is shown read-only in the list to keep the change list short.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
    Appointment,
    ClinicalNote,
    Patient,
    Specialty,
    Staff,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'role', 'is_active', 'is_staff', 'date_joined')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'username')
    exclude = ('password',)


@admin.register(Specialty)
class SpecialtyAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'birth_date', 'tax_id', 'account')
    search_fields = ('name', 'tax_id', 'email')
    raw_id_fields = ('account',)


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'role_title', 'specialty', 'license_number', 'account')
    list_filter = ('role_title', 'specialty')
    search_fields = ('name', 'tax_id', 'license_number')
    raw_id_fields = ('account',)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'scheduled_at', 'patient', 'staff', 'kind')
    list_filter = ('kind',)
    search_fields = ('patient__name', 'staff__name')
    date_hierarchy = 'scheduled_at'
    raw_id_fields = ('patient', 'staff')


@admin.register(ClinicalNote)
class ClinicalNoteAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'staff', 'appointment', 'created_at')
    search_fields = ('patient__name', 'staff__name')
    raw_id_fields = ('patient', 'staff', 'appointment')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'object_type', 'object_id', 'user')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
