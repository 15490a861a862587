from rest_framework import serializers

from .base import clean_text


class ClinicalNoteSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    staff_id = serializers.IntegerField()
    appointment_id = serializers.IntegerField(required=False, allow_null=True)
    observations = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_observations(self, v):
        return clean_text(v) or ''
