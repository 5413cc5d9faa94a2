"""
Coupon services module.
"""
from .coupon_service import CouponService

__all__ = [
    'CouponService',
]
