"""
Coupon serializers module.
"""
from .coupon_serializers import (
    CouponSerializer, CouponUsageSerializer, CouponWriteSerializer,
    CouponValidateSerializer, CouponRedeemSerializer
)

__all__ = [
    'CouponSerializer',
    'CouponUsageSerializer',
    'CouponWriteSerializer',
    'CouponValidateSerializer',
    'CouponRedeemSerializer',
]
