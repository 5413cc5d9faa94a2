"""
Order creation and query views.
"""
import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.common.utils import success_response, error_response
from ..models import Order
from ..serializers import OrderSerializer, OrderCreateSerializer
from ..services import OrderService

logger = logging.getLogger(__name__)


class CreateOrderView(APIView):
    """Checkout endpoint, open to guests and signed-in customers"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Order request rejected: {serializer.errors}")
            return error_response("Invalid order data", serializer.errors)

        data = serializer.validated_data
        order = OrderService.create_order(
            customer_info=data['customer_info'],
            cart_items=data['items'],
            delivery_area=data.get('delivery_area'),
            user=request.user,
            coupon_code=data.get('coupon_code') or None,
            remark=data.get('remark', ''),
        )
        order = OrderService.get_order(order.pk)
        return success_response(
            OrderSerializer(order).data,
            "Order created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class MyOrdersView(APIView):
    """Orders placed by the current user"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        status_filter = request.GET.get('status') or None
        if status_filter and status_filter not in Order.FulfillmentStatus.values:
            return error_response(f"Unknown status: {status_filter}")

        orders = OrderService.list_user_orders(request.user, status_filter)
        return success_response(OrderSerializer(orders, many=True).data)
