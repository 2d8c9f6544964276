# core/validation.py
from .exceptions import ValidationError


def validate_payload(serializer_class, data, **context):
    """
    Run ``data`` through a DRF serializer used as an input schema.

    Unknown fields are rejected, missing required fields are reported per
    field. Returns ``validated_data``; raises ValidationError with the
    serializer's errors as details.
    """
    serializer = serializer_class(data=data, context=context)
    if not serializer.is_valid():
        raise ValidationError(details=serializer.errors)
    return serializer.validated_data
