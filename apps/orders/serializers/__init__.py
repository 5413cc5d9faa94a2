"""
Order serializers module.
"""
from .order_serializers import (
    OrderItemSerializer, OrderSerializer, OrderListSerializer,
    CustomerInfoSerializer, CartItemSerializer, OrderCreateSerializer
)
from .order_action_serializers import (
    FulfillmentStatusSerializer, PaymentStatusSerializer, OrderRefundSerializer
)

__all__ = [
    'OrderItemSerializer',
    'OrderSerializer',
    'OrderListSerializer',
    'CustomerInfoSerializer',
    'CartItemSerializer',
    'OrderCreateSerializer',
    'FulfillmentStatusSerializer',
    'PaymentStatusSerializer',
    'OrderRefundSerializer',
]
