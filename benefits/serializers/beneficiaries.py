from rest_framework import serializers

from benefits.models import Beneficiary
from .common import CalendarDateField, CleanCharField, StrictSerializer


class BeneficiaryCreateSerializer(StrictSerializer):
    householdId = serializers.IntegerField(min_value=1)
    cardId = serializers.IntegerField(min_value=1)
    benefitType = serializers.ChoiceField(choices=Beneficiary.TYPE_CHOICES)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    description = CleanCharField(required=False, allow_blank=True)
    startDate = CalendarDateField()
    endDate = CalendarDateField(required=False, allow_null=True)
    memberIds = serializers.ListField(child=serializers.IntegerField(min_value=1), min_length=1)

    def validate(self, attrs):
        end = attrs.get('endDate')
        if end and end < attrs['startDate']:
            raise serializers.ValidationError({'endDate': ['End date cannot be before start date.']})
        return attrs


class BeneficiaryUpdateSerializer(StrictSerializer):
    benefitType = serializers.ChoiceField(choices=Beneficiary.TYPE_CHOICES, required=False)
    status = serializers.ChoiceField(choices=Beneficiary.STATUS_CHOICES, required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    description = CleanCharField(required=False, allow_blank=True)
    startDate = CalendarDateField(required=False)
    endDate = CalendarDateField(required=False, allow_null=True)
    memberIds = serializers.ListField(child=serializers.IntegerField(min_value=1), min_length=1, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Nothing to update')
        return attrs


class BeneficiaryListQuerySerializer(serializers.Serializer):
    householdId = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=Beneficiary.STATUS_CHOICES, required=False)
