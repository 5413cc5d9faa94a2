"""
Customer-facing coupon views.
"""
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.common.utils import success_response, error_response
from apps.orders.serializers import OrderSerializer
from ..serializers import CouponValidateSerializer, CouponRedeemSerializer, CouponUsageSerializer
from ..services import CouponService


class ValidateCouponView(APIView):
    """Preview the discount a coupon grants on a subtotal"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CouponValidateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid coupon request", serializer.errors)

        result = CouponService.validate_code(
            serializer.validated_data['code'],
            serializer.validated_data['subtotal'],
        )
        return success_response(result, "Coupon is valid")


class RedeemCouponView(APIView):
    """Apply a coupon to one of the current user's pending orders"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CouponRedeemSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid coupon request", serializer.errors)

        usage = CouponService.redeem_for_order(
            serializer.validated_data['order_id'],
            serializer.validated_data['code'],
            user=request.user,
        )
        data = OrderSerializer(usage.order).data
        data['coupon_usage'] = CouponUsageSerializer(usage).data
        return success_response(data, "Coupon applied")
