"""
Coupon serializers for validation, redemption and admin configuration.
"""
from rest_framework import serializers

from apps.common.validators import validate_coupon_code, validate_price_range
from ..models import Coupon, CouponUsage


class CouponSerializer(serializers.ModelSerializer):
    """Coupon with usage statistics"""

    discount_type = serializers.CharField(source='mode', read_only=True)
    remaining_uses = serializers.IntegerField(read_only=True)
    usage_count = serializers.SerializerMethodField()

    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'description', 'discount_type', 'discount_percentage',
            'discount_amount', 'max_discount_amount', 'expiry_date',
            'min_purchase_amount', 'usage_limit', 'used_count',
            'remaining_uses', 'usage_count', 'is_active', 'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_usage_count(self, obj):
        # Annotated by list queries; detail views fall back to a count
        count = getattr(obj, 'usage_count', None)
        return count if count is not None else obj.usages.count()


class CouponUsageSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    username = serializers.SerializerMethodField()

    class Meta:
        model = CouponUsage
        fields = ['id', 'order', 'order_number', 'user', 'username', 'discount_amount', 'used_at']
        read_only_fields = fields

    def get_username(self, obj):
        return obj.user.get_username() if obj.user_id else None


class CouponWriteSerializer(serializers.Serializer):
    """Input for creating or updating a coupon"""

    code = serializers.CharField(max_length=50)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    discount_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    max_discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)
    min_purchase_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, validators=[validate_price_range]
    )
    usage_limit = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)

    def validate_code(self, value):
        return validate_coupon_code(value)


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, validators=[validate_price_range])


class CouponRedeemSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    order_id = serializers.IntegerField()
