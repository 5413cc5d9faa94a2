"""
Coupon validation, redemption and admin configuration.

Redemption is a single conditional UPDATE on ``used_count`` executed in the
same transaction as the ``CouponUsage`` insert, so concurrent redemptions of a
nearly exhausted coupon can never overshoot ``usage_limit``.
"""
import logging
from decimal import Decimal
from typing import Dict, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from apps.common.exceptions import (
    ConflictError, ExhaustedError, InvalidError, InvalidTransitionError,
    NotFoundError, ValidationError, translate_store_errors,
)
from apps.common.utils import paginate, quantize_money
from apps.common.validators import normalize_coupon_code
from apps.orders.models import Order
from ..models import Coupon, CouponUsage

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'code', 'description', 'discount_percentage', 'discount_amount',
    'max_discount_amount', 'expiry_date', 'min_purchase_amount',
    'usage_limit', 'is_active',
)


def _customer(user):
    """Authenticated user or None for guests"""
    if user is not None and getattr(user, 'is_authenticated', False):
        return user
    return None


class CouponService:
    """Service class for coupon business logic"""

    @staticmethod
    def get_by_code(code: str) -> Coupon:
        normalized = normalize_coupon_code(code)
        if not normalized:
            raise ValidationError("Coupon code is required")
        try:
            return Coupon.objects.get(code=normalized)
        except Coupon.DoesNotExist:
            raise NotFoundError(f"Coupon {normalized} not found", code='coupon_not_found')

    @staticmethod
    def get_by_id(coupon_id) -> Coupon:
        try:
            return Coupon.objects.get(pk=coupon_id)
        except Coupon.DoesNotExist:
            raise NotFoundError("Coupon not found", code='coupon_not_found')

    @staticmethod
    def calculate_discount(coupon: Coupon, subtotal) -> Decimal:
        """
        Discount granted by coupon on subtotal.

        Percentage coupons are capped by max_discount_amount when set, flat
        coupons by the subtotal itself.
        """
        subtotal = quantize_money(subtotal)
        if coupon.discount_percentage is not None:
            discount = quantize_money(subtotal * coupon.discount_percentage / Decimal('100'))
            if coupon.max_discount_amount is not None:
                discount = min(discount, quantize_money(coupon.max_discount_amount))
        else:
            discount = min(quantize_money(coupon.discount_amount), subtotal)
        return discount

    @staticmethod
    def check_eligibility(coupon: Coupon, subtotal, now=None) -> None:
        """Raise InvalidError or ExhaustedError when coupon cannot apply to subtotal"""
        now = now or timezone.now()
        subtotal = quantize_money(subtotal)

        if not coupon.is_active:
            raise InvalidError("Coupon is inactive", details={'reason': 'inactive'})
        if coupon.is_expired(now):
            raise InvalidError("Coupon has expired", details={'reason': 'expired'})
        if subtotal < coupon.min_purchase_amount:
            raise InvalidError(
                f"Minimum purchase amount of {coupon.min_purchase_amount} required",
                details={'reason': 'min_purchase', 'min_purchase_amount': str(coupon.min_purchase_amount)},
            )
        if coupon.is_exhausted:
            raise ExhaustedError()

    @staticmethod
    def validate(code: str, subtotal, now=None) -> Decimal:
        """Check a coupon against a subtotal and return its discount. Read-only."""
        coupon = CouponService.get_by_code(code)
        CouponService.check_eligibility(coupon, subtotal, now)
        return CouponService.calculate_discount(coupon, subtotal)

    @staticmethod
    @translate_store_errors
    def validate_code(code: str, subtotal, now=None) -> Dict:
        """Validate a coupon for display before checkout"""
        coupon = CouponService.get_by_code(code)
        CouponService.check_eligibility(coupon, subtotal, now)
        discount = CouponService.calculate_discount(coupon, subtotal)
        subtotal = quantize_money(subtotal)
        return {
            'coupon_id': coupon.id,
            'code': coupon.code,
            'description': coupon.description,
            'discount_type': coupon.mode,
            'discount_percentage': coupon.discount_percentage,
            'max_discount_amount': coupon.max_discount_amount,
            'discount': discount,
            'subtotal': subtotal,
            'total_after_discount': subtotal - discount,
        }

    @staticmethod
    @translate_store_errors
    def redeem(coupon_or_code, order: Order, user=None, subtotal=None, now=None) -> Tuple[Coupon, Decimal]:
        """
        Consume one use of a coupon for order.

        Runs inside the caller's transaction when there is one; any later
        failure there rolls back the increment and the usage record too.

        Returns:
            tuple: (coupon with refreshed used_count, discount amount)
        """
        if isinstance(coupon_or_code, Coupon):
            coupon = CouponService.get_by_id(coupon_or_code.pk)
        else:
            coupon = CouponService.get_by_code(coupon_or_code)

        subtotal = order.subtotal if subtotal is None else subtotal
        customer = _customer(user)

        CouponService.check_eligibility(coupon, subtotal, now)
        if CouponUsage.objects.filter(order=order).exists():
            raise ConflictError("A coupon has already been applied to this order")
        if customer is not None and CouponUsage.objects.filter(coupon=coupon, user=customer).exists():
            raise InvalidError(
                "Coupon has already been used by this customer",
                details={'reason': 'already_used'},
            )

        discount = CouponService.calculate_discount(coupon, subtotal)

        try:
            with transaction.atomic():
                updated = Coupon.objects.filter(
                    pk=coupon.pk,
                    is_active=True,
                ).filter(
                    Q(usage_limit__isnull=True) | Q(used_count__lt=F('usage_limit'))
                ).update(
                    used_count=F('used_count') + 1,
                    updated_at=timezone.now(),
                )
                if not updated:
                    logger.warning(f"Coupon {coupon.code} exhausted while redeeming for order {order.order_number}")
                    raise ExhaustedError()

                CouponUsage.objects.create(
                    coupon=coupon,
                    user=customer,
                    order=order,
                    discount_amount=discount,
                )
        except IntegrityError as e:
            logger.warning(f"Duplicate redemption of {coupon.code} for order {order.order_number}: {e}")
            raise InvalidError(
                "Coupon has already been used by this customer",
                details={'reason': 'already_used'},
            ) from e

        coupon.refresh_from_db(fields=['used_count'])
        logger.info(
            f"Coupon {coupon.code} redeemed for order {order.order_number}: "
            f"discount {discount}, used {coupon.used_count}/{coupon.usage_limit or 'unlimited'}"
        )
        return coupon, discount

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def redeem_for_order(order_id, code: str, user=None, now=None) -> CouponUsage:
        """
        Apply a coupon to an existing pending order and recompute its total.

        Only the order's owner may redeem: a signed-in customer never sees
        guest orders or other customers' orders, and a call without a user
        only reaches guest orders. Only orders that are still pending on both
        fulfillment and payment and carry no coupon yet are eligible.

        Returns:
            CouponUsage: the new usage record, with ``order`` already updated
        """
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFoundError("Order not found", code='order_not_found')

        customer = _customer(user)
        if order.user_id != (customer.pk if customer is not None else None):
            logger.warning(f"Coupon redemption on order {order.order_number} refused for user {user}")
            raise NotFoundError("Order not found", code='order_not_found')

        if (
            order.fulfillment_status != Order.FulfillmentStatus.PENDING
            or order.payment_status != Order.PaymentStatus.PENDING
        ):
            raise InvalidTransitionError("Coupons can only be applied to pending orders")
        if order.coupon_id is not None:
            raise ConflictError("A coupon has already been applied to this order")

        coupon, discount = CouponService.redeem(code, order, customer, order.subtotal, now)

        order.coupon = coupon
        order.discount_amount = discount
        order.total_amount = order.subtotal + order.shipping_cost - discount
        order.save(update_fields=['coupon', 'discount_amount', 'total_amount', 'updated_at'])
        return order.coupon_usage

    @staticmethod
    def _check_configuration(values: Dict) -> None:
        percentage = values.get('discount_percentage')
        amount = values.get('discount_amount')

        if (percentage is None) == (amount is None):
            raise ValidationError(
                "Exactly one of discount_percentage or discount_amount must be set",
                details={'reason': 'discount_mode'},
            )
        if percentage is not None and not (Decimal('0') < Decimal(str(percentage)) <= Decimal('100')):
            raise ValidationError("discount_percentage must be greater than 0 and at most 100")
        if amount is not None and Decimal(str(amount)) <= 0:
            raise ValidationError("discount_amount must be greater than 0")
        if values.get('max_discount_amount') is not None and Decimal(str(values['max_discount_amount'])) <= 0:
            raise ValidationError("max_discount_amount must be greater than 0")
        if values.get('min_purchase_amount') is not None and Decimal(str(values['min_purchase_amount'])) < 0:
            raise ValidationError("min_purchase_amount cannot be negative")

    @staticmethod
    @translate_store_errors
    def create_coupon(data: Dict, created_by=None) -> Coupon:
        values = {field: data[field] for field in EDITABLE_FIELDS if field in data}
        values['code'] = normalize_coupon_code(values.get('code'))
        if not values['code']:
            raise ValidationError("Coupon code is required")
        if values.get('min_purchase_amount') is None:
            values.pop('min_purchase_amount', None)
        CouponService._check_configuration(values)

        if Coupon.objects.filter(code=values['code']).exists():
            raise ConflictError(f"Coupon code {values['code']} already exists")

        try:
            with transaction.atomic():
                coupon = Coupon.objects.create(created_by=_customer(created_by), **values)
        except IntegrityError as e:
            raise ConflictError(f"Coupon code {values['code']} already exists") from e

        logger.info(f"Coupon {coupon.code} created (id={coupon.id})")
        return coupon

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def update_coupon(coupon_id, data: Dict) -> Coupon:
        try:
            coupon = Coupon.objects.select_for_update().get(pk=coupon_id)
        except Coupon.DoesNotExist:
            raise NotFoundError("Coupon not found", code='coupon_not_found')

        if 'used_count' in data:
            raise ValidationError("used_count cannot be edited")

        changes = {field: data[field] for field in EDITABLE_FIELDS if field in data}
        if 'code' in changes:
            changes['code'] = normalize_coupon_code(changes['code'])
            if not changes['code']:
                raise ValidationError("Coupon code is required")
            if Coupon.objects.filter(code=changes['code']).exclude(pk=coupon.pk).exists():
                raise ConflictError(f"Coupon code {changes['code']} already exists")

        merged = {field: getattr(coupon, field) for field in EDITABLE_FIELDS}
        merged.update(changes)
        CouponService._check_configuration(merged)

        if merged['usage_limit'] is not None and merged['usage_limit'] < coupon.used_count:
            raise ValidationError(
                f"usage_limit cannot be lower than the {coupon.used_count} uses already made"
            )

        for field, value in changes.items():
            setattr(coupon, field, value)
        coupon.save()

        logger.info(f"Coupon {coupon.code} updated: {sorted(changes)}")
        return coupon

    @staticmethod
    @translate_store_errors
    def deactivate_coupon(coupon_id) -> Coupon:
        coupon = CouponService.get_by_id(coupon_id)
        if coupon.is_active:
            coupon.is_active = False
            coupon.save(update_fields=['is_active', 'updated_at'])
            logger.info(f"Coupon {coupon.code} deactivated")
        return coupon

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def delete_coupon(coupon_id) -> None:
        """Delete a coupon that has never been redeemed"""
        try:
            coupon = Coupon.objects.select_for_update().get(pk=coupon_id)
        except Coupon.DoesNotExist:
            raise NotFoundError("Coupon not found", code='coupon_not_found')

        if coupon.used_count > 0 or coupon.usages.exists():
            raise ConflictError("Coupon has been used and cannot be deleted; deactivate it instead")

        code = coupon.code
        coupon.delete()
        logger.info(f"Coupon {code} deleted")

    @staticmethod
    @translate_store_errors
    def list_coupons(active_only: bool = False, page: int = 1, limit: int = 20) -> Tuple[list, Dict]:
        queryset = Coupon.objects.annotate(usage_count=Count('usages'))
        if active_only:
            now = timezone.now()
            queryset = queryset.filter(is_active=True).filter(
                Q(expiry_date__isnull=True) | Q(expiry_date__gte=now)
            )
        return paginate(queryset.order_by('-created_at'), page, limit)

    @staticmethod
    @translate_store_errors
    def get_coupon_detail(coupon_id) -> Tuple[Coupon, list]:
        coupon = CouponService.get_by_id(coupon_id)
        usages = list(coupon.usages.select_related('order', 'user').order_by('-used_at'))
        return coupon, usages
