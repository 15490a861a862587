from rest_framework import serializers

from records.models import Staff

from .base import clean_text

ROLE_TITLE_HINT = 'role_title must be one of: ' + ', '.join(
    f'{value}-{label}' for value, label in Staff.RoleTitle.choices
)


class StaffSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    tax_id = serializers.CharField(max_length=32)
    role_title = serializers.ChoiceField(
        choices=Staff.RoleTitle.choices, error_messages={'invalid_choice': ROLE_TITLE_HINT}
    )
    specialty_id = serializers.IntegerField(required=False, allow_null=True)
    license_number = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=64)
    account_id = serializers.IntegerField(required=False, allow_null=True)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('This field may not be blank.', code='blank')
        return v

    def validate_license_number(self, v):
        # Blank and null both mean "no license"; NULLs never collide on the unique index
        return (v or '').strip() or None
