from rest_framework import serializers

from .common import StrictSerializer


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class LogoutSerializer(StrictSerializer):
    # Omitted means "revoke every refresh token the user holds"
    refresh = serializers.CharField(required=False, allow_blank=False, trim_whitespace=True)
