"""
Coupon views module.
"""
from .coupon_views import ValidateCouponView, RedeemCouponView
from .admin_coupon_views import CouponListCreateView, CouponDetailView

__all__ = [
    'ValidateCouponView',
    'RedeemCouponView',
    'CouponListCreateView',
    'CouponDetailView',
]
