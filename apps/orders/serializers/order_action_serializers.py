"""
Order action serializers for admin status changes and refunds.
"""
from rest_framework import serializers

from ..models import Order


class FulfillmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.FulfillmentStatus.choices)


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Order.PaymentStatus.choices)


class OrderRefundSerializer(serializers.Serializer):
    """Serializer for order refund requests"""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')

    def validate_amount(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Refund amount must be greater than 0")
        return value
