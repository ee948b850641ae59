from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from apps.payments.services import is_valid_czech_account
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Current user with the billing profile."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'company_name',
            'company_id',
            'vat_id',
            'address',
            'bank_account',
            'email_verified',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'email_verified', 'created_at', 'last_login']

    def validate_bank_account(self, value):
        value = (value or '').strip()
        if value and not is_valid_czech_account(value):
            raise serializers.ValidationError(
                'Invalid bank account. Use prefix-number/bank code or a CZ IBAN.'
            )
        return value


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'password_confirm', 'display_name', 'company_name']

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class DeleteAccountSerializer(serializers.Serializer):
    """Password confirmation for account deletion."""

    password = serializers.CharField(required=True, style={'input_type': 'password'})
    confirm = serializers.BooleanField(required=True)

    def validate_confirm(self, value):
        if not value:
            raise serializers.ValidationError('Confirmation required')
        return value
