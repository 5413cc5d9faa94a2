"""
Validators for the shipping contact captured on an order.
"""
import re
from rest_framework import serializers

PHONE_PATTERN = re.compile(r'^\+?[0-9][0-9\s-]{5,18}[0-9]$')


def validate_phone(value):
    """
    Validate phone number format.

    Accepts digits with optional leading '+', spaces and dashes.
    """
    if not value:
        return value

    if not PHONE_PATTERN.match(value.strip()):
        raise serializers.ValidationError("Invalid phone number format.")

    return value.strip()
