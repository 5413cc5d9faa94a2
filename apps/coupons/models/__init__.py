"""
Coupon models module.
"""
from .coupon import Coupon
from .coupon_usage import CouponUsage

__all__ = [
    'Coupon',
    'CouponUsage',
]
