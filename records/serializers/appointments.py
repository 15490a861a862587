from rest_framework import serializers

from records.models import Appointment

from .base import clean_text

KIND_HINT = 'kind must be one of: ' + ', '.join(
    f'{value}-{label}' for value, label in Appointment.Kind.choices
)


class AppointmentSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    staff_id = serializers.IntegerField()
    scheduled_at = serializers.DateTimeField()
    kind = serializers.ChoiceField(choices=Appointment.Kind.choices, error_messages={'invalid_choice': KIND_HINT})
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_description(self, v):
        return clean_text(v)
