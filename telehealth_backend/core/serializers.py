"""Serializers for the core app.

Contains serializers for users, roles, the audit log and the login flows
(password, magic link, passkeys). Follows the Read/Write serializer pattern.
"""

from rest_framework import serializers

from telehealth_backend.core import capabilities
from telehealth_backend.core.models import AuditLog, AuthChallenge, Passkey, Role, User


# -----------------------------------------------------------------------------
# Role / User Serializers
# -----------------------------------------------------------------------------


class RoleSerializer(serializers.ModelSerializer):
    """Read-only serializer for Role model."""

    class Meta:
        model = Role
        fields = ['id', 'name', 'label']
        read_only_fields = fields


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer for the /auth/me/ endpoint.

    Returns current user info with role details and effective capabilities.
    """

    role = RoleSerializer(read_only=True)
    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'phone',
            'is_active',
            'role',
            'capabilities',
        ]
        read_only_fields = fields

    def get_capabilities(self, obj):
        return sorted(capabilities.capabilities_for(obj))


# -----------------------------------------------------------------------------
# AuditLog Serializers
# -----------------------------------------------------------------------------


class AuditLogSerializer(serializers.ModelSerializer):
    """Read-only serializer for AuditLog model."""

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'user',
            'actor_email',
            'role_name',
            'action',
            'entity_type',
            'entity_id',
            'changes',
            'ip_address',
            'timestamp',
        ]
        read_only_fields = fields


class AuditLogCreateSerializer(serializers.Serializer):
    """Manual audit entry."""

    action = serializers.CharField(max_length=64)
    entity_type = serializers.CharField(max_length=64)
    entity_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    changes = serializers.JSONField(required=False, allow_null=True, default=None)


# -----------------------------------------------------------------------------
# Authentication Serializers
# -----------------------------------------------------------------------------


class LoginSerializer(serializers.Serializer):
    """Validates credentials and returns the user."""

    username = serializers.CharField(required=True)
    password = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        from django.contrib.auth import authenticate

        user = authenticate(username=attrs.get('username'), password=attrs.get('password'))

        if user is None:
            raise serializers.ValidationError('Invalid credentials.')

        if not user.is_active:
            raise serializers.ValidationError('User account is disabled.')

        attrs['user'] = user
        return attrs


class RefreshSerializer(serializers.Serializer):
    """Validates a refresh token."""

    refresh = serializers.CharField(required=True)

    def validate_refresh(self, value):
        from rest_framework_simplejwt.tokens import RefreshToken
        from rest_framework_simplejwt.exceptions import TokenError

        try:
            RefreshToken(value)
        except TokenError as e:
            raise serializers.ValidationError(f'Invalid or expired refresh token: {e}')
        return value


class MagicLinkRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        return value.strip().lower()


class MagicLinkVerifySerializer(serializers.Serializer):
    email = serializers.EmailField()
    code = serializers.CharField(max_length=32)

    def validate_email(self, value):
        return value.strip().lower()


# -----------------------------------------------------------------------------
# Passkey Serializers
# -----------------------------------------------------------------------------


class PasskeySerializer(serializers.ModelSerializer):
    class Meta:
        model = Passkey
        fields = [
            'id',
            'email',
            'credential_id',
            'device_type',
            'backed_up',
            'transports',
            'login_count',
            'created_at',
            'last_used_at',
        ]
        read_only_fields = fields


class PasskeyChallengeSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=AuthChallenge.TYPE_CHOICES)
    client_fingerprint = serializers.CharField(required=False, allow_blank=True, default='', max_length=255)


class PasskeyRegisterSerializer(serializers.Serializer):
    challenge = serializers.CharField(max_length=128)
    credential_id = serializers.CharField(max_length=512)
    public_key = serializers.CharField()
    counter = serializers.IntegerField(min_value=0, default=0)
    device_type = serializers.CharField(required=False, allow_blank=True, default='', max_length=64)
    backed_up = serializers.BooleanField(required=False, default=False)
    transports = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class PasskeyAuthenticateSerializer(serializers.Serializer):
    challenge = serializers.CharField(max_length=128)
    credential_id = serializers.CharField(max_length=512)
    counter = serializers.IntegerField(min_value=0)


class RateLimitResetSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=255)
