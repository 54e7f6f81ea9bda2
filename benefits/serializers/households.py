from rest_framework import serializers

from benefits.models import Member
from .common import CalendarDateField, CleanCharField, StrictSerializer


class MemberSerializer(StrictSerializer):
    firstName = CleanCharField(max_length=128)
    lastName = CleanCharField(max_length=128, required=False, allow_blank=True)
    dob = CalendarDateField()
    relation = serializers.ChoiceField(choices=Member.RELATION_CHOICES)
    nationalId = serializers.CharField(max_length=32)

    def validate_nationalId(self, v):
        v = ''.join(v.split())
        if not v.isalnum():
            raise serializers.ValidationError('National ID must be letters and digits only')
        return v


class HouseholdCreateSerializer(StrictSerializer):
    headName = CleanCharField(max_length=255)
    address = CleanCharField()
    phone = serializers.CharField(max_length=32)
    members = MemberSerializer(many=True, required=False)

    def validate_phone(self, v):
        return v.strip()


class HouseholdUpdateSerializer(HouseholdCreateSerializer):
    headName = CleanCharField(max_length=255, required=False)
    address = CleanCharField(required=False)
    phone = serializers.CharField(max_length=32, required=False)


class HouseholdListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(max_length=64, required=False, allow_blank=True)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=10)
