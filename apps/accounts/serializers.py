from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, DEFAULT_CURRENCY


def _currency_field(**kwargs):
    return serializers.RegexField(
        regex=r'^[A-Za-z]{3}$',
        error_messages={'invalid': 'Enter a three-letter currency code.'},
        **kwargs
    )


class UserSerializer(serializers.ModelSerializer):
    """Current user's profile."""

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'currency', 'created_at', 'last_login']
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """User reference nested in group, ledger and notification payloads."""

    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(write_only=True, style={'input_type': 'password'})
    display_name = serializers.CharField(max_length=100, required=False, default='', allow_blank=True)
    currency = _currency_field(required=False, default=DEFAULT_CURRENCY)

    def validate(self, attrs):
        if attrs['password'] != attrs.pop('password_confirm'):
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class UserProfileUpdateSerializer(serializers.Serializer):
    """Partial profile update; omitted fields keep their value."""

    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    currency = _currency_field(required=False)
