from rest_framework import serializers

from records.models import Role

ROLE_HINT = 'role must be one of: ' + ', '.join(Role.values)


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=Role.choices, error_messages={'invalid_choice': ROLE_HINT})

    def validate_email(self, v):
        return v.strip().lower()


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()
