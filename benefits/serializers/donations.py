from rest_framework import serializers

from benefits.models import Donation
from .common import CalendarDateField, CleanCharField, StrictSerializer


class DonationSerializer(StrictSerializer):
    donorName = CleanCharField(max_length=255)
    donorEmail = serializers.EmailField(required=False, allow_blank=True)
    donorPhone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    donorAddress = CleanCharField(required=False, allow_blank=True)
    donorType = serializers.ChoiceField(choices=Donation.DONOR_TYPE_CHOICES, required=False)
    donorPAN = serializers.CharField(max_length=16, required=False, allow_blank=True)
    organizationName = CleanCharField(max_length=255, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=Donation.TYPE_CHOICES)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True)
    description = CleanCharField(required=False, allow_blank=True)
    paymentMethod = serializers.ChoiceField(choices=Donation.PAYMENT_METHOD_CHOICES, required=False)
    paymentReference = serializers.CharField(max_length=128, required=False, allow_blank=True)
    paymentDate = CalendarDateField()
    isAnonymous = serializers.BooleanField(required=False)
    notes = CleanCharField(required=False, allow_blank=True)
    hospitalId = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate(self, attrs):
        if self.partial:
            return attrs
        if attrs.get('donorType') == 'ORGANIZATION' and not attrs.get('organizationName'):
            raise serializers.ValidationError({'organizationName': ['Required for organization donors.']})
        if attrs['type'] == 'MONETARY' and attrs.get('amount') is None:
            raise serializers.ValidationError({'amount': ['Required for monetary donations.']})
        return attrs
