from django.urls import path
from . import views

urlpatterns = [
    path('validate', views.ValidateCouponView.as_view(), name='validate-coupon'),
    path('redeem', views.RedeemCouponView.as_view(), name='redeem-coupon'),

    # Admin endpoints
    path('', views.CouponListCreateView.as_view(), name='coupon-list'),
    path('<int:coupon_id>', views.CouponDetailView.as_view(), name='coupon-detail'),
]
