"""
Order serializers for list, detail, and create operations.
"""
from rest_framework import serializers

from apps.common.validators import validate_phone, validate_quantity
from ..models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Serializer for order item snapshots"""

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'product_name', 'unit_price', 'quantity', 'subtotal']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Full order representation with its items"""

    items = OrderItemSerializer(many=True, read_only=True)
    coupon_code = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'user', 'shipping_name', 'shipping_email',
            'shipping_phone', 'shipping_address', 'subtotal', 'shipping_cost',
            'discount_amount', 'total_amount', 'delivery_area',
            'fulfillment_status', 'payment_status', 'coupon_code',
            'refund_amount', 'refund_reason', 'refunded_at', 'remark',
            'created_at', 'updated_at', 'paid_at', 'shipped_at',
            'delivered_at', 'cancelled_at', 'items', 'item_count',
        ]
        read_only_fields = fields

    def get_coupon_code(self, obj):
        return obj.coupon.code if obj.coupon_id else None

    def get_item_count(self, obj):
        """Total quantity of goods in order"""
        return sum(item.quantity for item in obj.items.all())


class OrderListSerializer(serializers.ModelSerializer):
    """Compact order row for admin listings"""

    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'shipping_name', 'shipping_email',
            'total_amount', 'fulfillment_status', 'payment_status',
            'created_at', 'item_count',
        ]
        read_only_fields = fields

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


class CustomerInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, validators=[validate_phone])
    address = serializers.CharField()


class CartItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(validators=[validate_quantity])


class OrderCreateSerializer(serializers.Serializer):
    """Checkout request: customer contact, cart and optional coupon"""

    customer_info = CustomerInfoSerializer()
    items = CartItemSerializer(many=True, allow_empty=False)
    delivery_area = serializers.ChoiceField(choices=Order.DeliveryArea.choices, required=False)
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True)
    remark = serializers.CharField(required=False, allow_blank=True, default='')
