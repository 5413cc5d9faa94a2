"""
Admin order management views.
"""
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import success_response, error_response
from ..serializers import (
    OrderSerializer, OrderListSerializer, FulfillmentStatusSerializer,
    PaymentStatusSerializer, OrderRefundSerializer
)
from ..services import OrderService, OrderStateService


class AdminOrderListView(APIView):
    """Paginated order list with status filters and search"""
    permission_classes = [IsAdminUser]

    def get(self, request):
        try:
            page = int(request.GET.get('page', 1))
            limit = min(int(request.GET.get('limit', 20)), 100)
        except ValueError:
            return error_response("page and limit must be integers")

        filters = {
            'fulfillment_status': request.GET.get('status'),
            'payment_status': request.GET.get('payment_status'),
            'search': request.GET.get('search'),
        }
        orders, pagination = OrderService.list_orders(filters, page, limit)
        return success_response({
            'orders': OrderListSerializer(orders, many=True).data,
            'pagination': pagination,
        })


class AdminOrderDetailView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, order_id):
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data)


class AdminOrderStatusView(APIView):
    """Move an order through the fulfillment lifecycle"""
    permission_classes = [IsAdminUser]

    def put(self, request, order_id):
        serializer = FulfillmentStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid status", serializer.errors)

        OrderStateService.set_fulfillment_status(order_id, serializer.validated_data['status'])
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, "Order status updated")


class AdminPaymentStatusView(APIView):
    permission_classes = [IsAdminUser]

    def put(self, request, order_id):
        serializer = PaymentStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid payment status", serializer.errors)

        OrderStateService.set_payment_status(order_id, serializer.validated_data['payment_status'])
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, "Payment status updated")


class AdminRefundOrderView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request, order_id):
        serializer = OrderRefundSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid refund request", serializer.errors)

        OrderStateService.refund_order(
            order_id,
            amount=serializer.validated_data.get('amount'),
            reason=serializer.validated_data.get('reason', ''),
        )
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, "Order refunded")


class AdminOrderInvoiceView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, order_id):
        invoice = OrderService.build_invoice(order_id)
        invoice['order_date'] = invoice['order_date'].isoformat()
        return success_response(invoice)
