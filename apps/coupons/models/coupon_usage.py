from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


class CouponUsage(models.Model):
    """
    Append-only record of one successful redemption.

    Created in the same transaction as the coupon's used_count increment, so
    every increment is backed by exactly one usage row.
    """

    coupon = models.ForeignKey('Coupon', on_delete=models.PROTECT, related_name='usages')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='coupon_usages'
    )
    order = models.OneToOneField(
        'orders.Order',
        on_delete=models.PROTECT,
        related_name='coupon_usage'
    )
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2)
    used_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'coupon_usages'
        ordering = ['-used_at']
        indexes = [
            models.Index(fields=['coupon', '-used_at'], name='coupon_usag_coupon_used_idx'),
            models.Index(fields=['user'], name='coupon_usag_user_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['coupon', 'user'],
                condition=Q(user__isnull=False),
                name='unique_coupon_per_user',
            ),
        ]

    def __str__(self):
        return f"{self.coupon.code} on order {self.order_id}"
