from rest_framework import serializers

from .common import CleanCharField, StrictSerializer


class PlanCreateSerializer(StrictSerializer):
    name = CleanCharField(max_length=128)
    description = CleanCharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    durationDays = serializers.IntegerField(min_value=1, max_value=3650)


class PlanUpdateSerializer(StrictSerializer):
    id = serializers.IntegerField(min_value=1)
    name = CleanCharField(max_length=128, required=False)
    description = CleanCharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    durationDays = serializers.IntegerField(min_value=1, max_value=3650, required=False)


class PlanDeleteQuerySerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
