"""Helpers turning DRF serializer errors into the API error taxonomy."""
from __future__ import annotations

import bleach
from rest_framework import serializers

from records.exceptions import InvalidValue, MissingField

_MISSING_CODES = {'required', 'null', 'blank'}


def clean_text(value):
    """Strip markup from free text; ``None`` passes through."""
    if value is None:
        return None
    return bleach.clean(value.strip(), tags=set(), strip=True)


def validated(serializer: serializers.Serializer) -> dict:
    """Run ``serializer`` and return its validated data.

    Absent, null or blank required fields raise ``MissingField`` naming
    them; any other problem raises ``InvalidValue``. With
    ``partial=True`` only keys actually present in the payload appear in
    the returned dict.
    """
    if serializer.is_valid():
        data = dict(serializer.validated_data)
        if serializer.partial and not data:
            raise InvalidValue('No fields to update were supplied.')
        return data

    missing = [
        field for field, errors in serializer.errors.items()
        if any(getattr(e, 'code', None) in _MISSING_CODES for e in errors)
    ]
    if missing:
        raise MissingField(missing)
    parts = []
    for field, errors in serializer.errors.items():
        parts.append(f"{field}: {' '.join(str(e) for e in errors)}")
    raise InvalidValue('; '.join(parts))
