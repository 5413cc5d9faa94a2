"""
Common validators module.

All validators are exported from this module.
"""
from .contact_validators import validate_phone
from .coupon_validators import normalize_coupon_code, validate_coupon_code
from .price_validators import (
    validate_price_range, validate_quantity
)

__all__ = [
    'validate_phone',
    'normalize_coupon_code',
    'validate_coupon_code',
    'validate_price_range',
    'validate_quantity',
]
