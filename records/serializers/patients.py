from rest_framework import serializers

from .base import clean_text


class PatientSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    birth_date = serializers.DateField()
    tax_id = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=32)
    account_id = serializers.IntegerField(required=False, allow_null=True)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('This field may not be blank.', code='blank')
        return v

    def validate_email(self, v):
        return v or None

    def validate_phone(self, v):
        return clean_text(v) or None
