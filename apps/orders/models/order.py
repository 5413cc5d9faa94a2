from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Order(models.Model):
    """
    Committed order record.

    Money fields are computed once at creation and never recomputed from
    live catalog prices.
    """

    class DeliveryArea(models.TextChoices):
        INSIDE_ZONE = 'inside_zone', 'Inside delivery zone'
        OUTSIDE_ZONE = 'outside_zone', 'Outside delivery zone'

    class FulfillmentStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        SHIPPING = 'shipping', 'Shipping'
        DELIVERED = 'delivered', 'Delivered'
        CANCELLED = 'cancelled', 'Cancelled'

    class PaymentStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'
        FAILED = 'failed', 'Failed'
        REFUNDED = 'refunded', 'Refunded'

    order_number = models.CharField(max_length=32, unique=True, editable=False, help_text="Customer-facing order number")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
        help_text="Empty for guest checkout"
    )

    # Shipping contact snapshot
    shipping_name = models.CharField(max_length=100)
    shipping_email = models.EmailField()
    shipping_phone = models.CharField(max_length=20)
    shipping_address = models.TextField()

    # Money
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, help_text="subtotal + shipping_cost - discount_amount")

    delivery_area = models.CharField(max_length=20, choices=DeliveryArea.choices)
    fulfillment_status = models.CharField(
        max_length=20, choices=FulfillmentStatus.choices, default=FulfillmentStatus.PENDING
    )
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    coupon = models.ForeignKey(
        'coupons.Coupon',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='orders'
    )

    # Refund information
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    refund_reason = models.CharField(max_length=255, blank=True, default='')
    refunded_at = models.DateTimeField(null=True, blank=True)

    remark = models.TextField(blank=True, default='', help_text="Order remarks")

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='orders_user_created_idx'),
            models.Index(fields=['fulfillment_status', 'created_at'], name='orders_fulfil_created_idx'),
            models.Index(fields=['payment_status'], name='orders_payment_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(discount_amount__gte=0) & Q(discount_amount__lte=F('subtotal')),
                name='order_discount_within_subtotal',
            ),
        ]

    def __str__(self):
        return f"Order {self.order_number}"
