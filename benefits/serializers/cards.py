from rest_framework import serializers

from benefits.models import Card
from .common import CalendarDateField, StrictSerializer


class CardCreateSerializer(StrictSerializer):
    householdId = serializers.IntegerField(min_value=1)
    planId = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=Card.STATUS_CHOICES, required=False)
    issueDate = CalendarDateField(required=False)


class CardUpdateSerializer(StrictSerializer):
    planId = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=Card.STATUS_CHOICES, required=False)
    issueDate = CalendarDateField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Nothing to update')
        return attrs


class CardListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Card.STATUS_CHOICES, required=False)
    householdId = serializers.IntegerField(min_value=1, required=False)


class CardLookupQuerySerializer(serializers.Serializer):
    query = serializers.CharField(max_length=64)
    status = serializers.ChoiceField(choices=Card.STATUS_CHOICES, required=False, default=Card.STATUS_ACTIVE)

    def validate_query(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Search query is required')
        return v


class PublicCardSearchSerializer(serializers.Serializer):
    cardNumber = serializers.CharField(max_length=32)
