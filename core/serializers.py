from rest_framework import serializers

from .sanitizers import is_clock_time


class RejectUnknownFieldsMixin:
    """
    Input schemas must not silently drop fields the client sent.
    """

    def to_internal_value(self, data):
        if hasattr(data, "keys"):
            unknown = set(data.keys()) - set(self.fields)
            if unknown:
                raise serializers.ValidationError(
                    {name: ["Unknown field."] for name in sorted(unknown)}
                )
        return super().to_internal_value(data)


class InputSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """Base class for operation payload schemas."""


class ClockTimeField(serializers.CharField):
    """A zero-padded "HH:MM" time of day kept as a string."""

    default_error_messages = {
        "format": "Time must be in HH:MM format.",
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not is_clock_time(value):
            self.fail("format")
        return value
