from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class Coupon(models.Model):
    """Promotional coupon with exactly one discount mode"""

    MODE_PERCENTAGE = 'percentage'
    MODE_AMOUNT = 'amount'

    code = models.CharField(max_length=50, unique=True, help_text="Stored upper-cased")
    description = models.CharField(max_length=255, blank=True, default='')

    # Exactly one of these is set
    discount_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True,
        help_text="Percentage off the subtotal (0-100]"
    )
    discount_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        help_text="Flat amount off the subtotal"
    )
    max_discount_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        help_text="Cap applied to percentage discounts"
    )

    expiry_date = models.DateTimeField(null=True, blank=True)
    min_purchase_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    usage_limit = models.PositiveIntegerField(null=True, blank=True, help_text="Empty means unlimited")
    used_count = models.PositiveIntegerField(default=0, help_text="Only grows, through redemption")
    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_coupons'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupons'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_active', 'expiry_date'], name='coupons_active_expiry_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(discount_percentage__isnull=False, discount_amount__isnull=True)
                    | Q(discount_percentage__isnull=True, discount_amount__isnull=False)
                ),
                name='coupon_single_discount_mode',
            ),
            models.CheckConstraint(
                condition=Q(discount_percentage__isnull=True)
                | Q(discount_percentage__gt=0, discount_percentage__lte=100),
                name='coupon_percentage_range',
            ),
            models.CheckConstraint(
                condition=Q(usage_limit__isnull=True) | Q(used_count__lte=F('usage_limit')),
                name='coupon_used_within_limit',
            ),
        ]

    def __str__(self):
        return self.code

    @property
    def mode(self):
        return self.MODE_PERCENTAGE if self.discount_percentage is not None else self.MODE_AMOUNT

    @property
    def remaining_uses(self):
        if self.usage_limit is None:
            return None
        return max(self.usage_limit - self.used_count, 0)

    @property
    def is_exhausted(self):
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    def is_expired(self, now=None):
        now = now or timezone.now()
        return self.expiry_date is not None and self.expiry_date < now
