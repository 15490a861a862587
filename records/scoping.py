"""
Ownership scoping for non-privileged roles.

Admins see and change everything. Every other caller is narrowed to the
rows that reference the patient or staff record linked to their own
account (``Patient.account`` / ``Staff.account``). An account with no
linked record owns nothing.

All checks here assume the row already exists: callers look the row up
first and raise ``NotFound`` when it is absent, so a denial is only ever
reported for rows that are really there.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access import GLOBAL_VISIBILITY
from .exceptions import Forbidden
from .models import Patient, Role, Staff


@dataclass(frozen=True)
class OwnershipScope:
    """The caller's identity resolved against patient and staff records."""
    account_id: int
    role: str
    patient_id: Optional[int] = None
    staff_id: Optional[int] = None

    @classmethod
    def for_user(cls, user) -> 'OwnershipScope':
        patient_id = staff_id = None
        if user.role == Role.PATIENT:
            patient_id = Patient.objects.filter(account_id=user.id).values_list('id', flat=True).first()
        elif user.role in (Role.PHYSICIAN, Role.NURSE, Role.ADMIN):
            staff_id = Staff.objects.filter(account_id=user.id).values_list('id', flat=True).first()
        return cls(account_id=user.id, role=user.role, patient_id=patient_id, staff_id=staff_id)

    @property
    def is_global(self) -> bool:
        return self.role in GLOBAL_VISIBILITY

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT

    @property
    def is_clinician(self) -> bool:
        return self.role in (Role.PHYSICIAN, Role.NURSE)

    # -- patients -------------------------------------------------------

    def ensure_patient_visible(self, patient_id: int) -> None:
        """Patient-role callers may only touch their own patient record."""
        if self.is_patient and patient_id != self.patient_id:
            raise Forbidden('Access denied: you can only access your own patient record.')

    # -- staff ----------------------------------------------------------

    def ensure_staff_visible(self, staff_id: int) -> None:
        if self.is_clinician and staff_id != self.staff_id:
            raise Forbidden('Access denied: you can only access your own staff record.')

    def ensure_acts_as_self(self, staff_id: Optional[int], what: str) -> None:
        """Clinicians cannot create or change ``what`` on behalf of another staff member."""
        if self.is_global:
            return
        if staff_id is None or staff_id != self.staff_id:
            raise Forbidden(f'Access denied: you can only manage your own {what}.')

    # -- appointments & clinical notes ----------------------------------

    def ensure_row_visible(self, *, patient_id: int, staff_id: int, what: str) -> None:
        """Read check for a single appointment or clinical note."""
        if self.is_global:
            return
        if self.is_patient:
            if patient_id != self.patient_id:
                raise Forbidden(f'Access denied: you can only view your own {what}.')
            return
        if staff_id != self.staff_id:
            raise Forbidden(f'Access denied: you can only view your own {what}.')
