from rest_framework import serializers

from .common import CleanCharField, StrictSerializer


class AgentCreateSerializer(StrictSerializer):
    name = CleanCharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class HospitalCreateSerializer(StrictSerializer):
    name = CleanCharField(max_length=255)
    address = CleanCharField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    licenseNo = serializers.CharField(max_length=64)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    userName = CleanCharField(max_length=150, required=False, allow_blank=True)


class HospitalUpdateSerializer(StrictSerializer):
    name = CleanCharField(max_length=255, required=False)
    address = CleanCharField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    licenseNo = serializers.CharField(max_length=64, required=False)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(write_only=True, required=False)
    userName = CleanCharField(max_length=150, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Nothing to update')
        return attrs


class HospitalListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(max_length=64, required=False, allow_blank=True)
