"""
Coupon code validators.
"""
import re
from rest_framework import serializers

CODE_PATTERN = re.compile(r'^[A-Z0-9_-]{3,50}$')


def normalize_coupon_code(value):
    """Coupon codes are compared upper-cased with surrounding whitespace removed"""
    return (value or '').strip().upper()


def validate_coupon_code(value):
    """
    Validate and normalize a coupon code.

    Raises:
        serializers.ValidationError: If the code contains unsupported characters

    Returns:
        str: Normalized code
    """
    code = normalize_coupon_code(value)
    if not CODE_PATTERN.match(code):
        raise serializers.ValidationError(
            "Coupon code must be 3-50 characters of letters, digits, '-' or '_'."
        )
    return code
