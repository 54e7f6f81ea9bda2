import bleach
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework import serializers


def clean_text(value: str) -> str:
    return bleach.clean((value or '').strip(), tags=set(), strip=True)


class StrictSerializer(serializers.Serializer):
    """A serializer that refuses payload keys it does not declare."""

    def to_internal_value(self, data):
        if hasattr(data, 'keys'):
            unknown = sorted(set(data.keys()) - set(self.fields))
            if unknown:
                raise serializers.ValidationError({key: ['Unknown field.'] for key in unknown})
        return super().to_internal_value(data)


class CalendarDateField(serializers.DateField):
    """Accepts ``YYYY-MM-DD`` or a full ISO datetime.

    Datetimes are reduced to their calendar date in the configured time
    zone, which is what browsers send from date pickers.
    """

    def to_internal_value(self, value):
        if isinstance(value, str) and 'T' in value:
            parsed = parse_datetime(value.strip())
            if parsed is not None:
                if timezone.is_aware(parsed):
                    parsed = timezone.localtime(parsed)
                return parsed.date()
        return super().to_internal_value(value)


class CleanCharField(serializers.CharField):
    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))
