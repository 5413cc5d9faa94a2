"""
Fulfillment and payment state machines for committed orders.

Every transition locks the order row, so concurrent admin actions on the
same order are serialized and an illegal move leaves the row untouched.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import (
    InvalidTransitionError, NotFoundError, ValidationError, translate_store_errors,
)
from apps.common.utils import quantize_money
from apps.products.services import CatalogService
from ..models import Order

logger = logging.getLogger(__name__)

Fulfillment = Order.FulfillmentStatus
Payment = Order.PaymentStatus

FULFILLMENT_TRANSITIONS = {
    Fulfillment.PENDING: {Fulfillment.SHIPPING, Fulfillment.CANCELLED},
    Fulfillment.SHIPPING: {Fulfillment.DELIVERED, Fulfillment.CANCELLED},
    Fulfillment.DELIVERED: set(),
    Fulfillment.CANCELLED: set(),
}

PAYMENT_TRANSITIONS = {
    Payment.PENDING: {Payment.PAID, Payment.FAILED},
    Payment.PAID: {Payment.REFUNDED},
    Payment.FAILED: set(),
    Payment.REFUNDED: set(),
}

FULFILLMENT_TIMESTAMPS = {
    Fulfillment.SHIPPING: 'shipped_at',
    Fulfillment.DELIVERED: 'delivered_at',
    Fulfillment.CANCELLED: 'cancelled_at',
}


class OrderStateService:
    """Service class for order status transitions"""

    @staticmethod
    def _lock(order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, ValueError):
            raise NotFoundError("Order not found", code='order_not_found')

    @staticmethod
    def can_transition(current: str, target: str, transitions=FULFILLMENT_TRANSITIONS) -> bool:
        return target in transitions.get(current, set())

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def set_fulfillment_status(order_id, new_status: str) -> Order:
        if new_status not in Fulfillment.values:
            raise ValidationError(f"Unknown fulfillment status: {new_status}")

        order = OrderStateService._lock(order_id)
        current = order.fulfillment_status
        if not OrderStateService.can_transition(current, new_status):
            logger.warning(f"Rejected fulfillment transition {current} -> {new_status} for order {order.order_number}")
            raise InvalidTransitionError(
                f"Cannot change fulfillment status from {current} to {new_status}",
                details={'from': current, 'to': new_status},
            )

        if new_status == Fulfillment.CANCELLED:
            for item in order.items.all():
                if item.product_id is not None:
                    CatalogService.release_stock(item.product_id, item.quantity)

        order.fulfillment_status = new_status
        timestamp_field = FULFILLMENT_TIMESTAMPS[new_status]
        setattr(order, timestamp_field, timezone.now())
        order.save(update_fields=['fulfillment_status', timestamp_field, 'updated_at'])

        logger.info(f"Order {order.order_number} fulfillment {current} -> {new_status}")
        return order

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def set_payment_status(order_id, new_status: str) -> Order:
        if new_status not in Payment.values:
            raise ValidationError(f"Unknown payment status: {new_status}")
        if new_status == Payment.REFUNDED:
            return OrderStateService.refund_order(order_id)

        order = OrderStateService._lock(order_id)
        current = order.payment_status
        if not OrderStateService.can_transition(current, new_status, PAYMENT_TRANSITIONS):
            logger.warning(f"Rejected payment transition {current} -> {new_status} for order {order.order_number}")
            raise InvalidTransitionError(
                f"Cannot change payment status from {current} to {new_status}",
                details={'from': current, 'to': new_status},
            )

        order.payment_status = new_status
        update_fields = ['payment_status', 'updated_at']
        if new_status == Payment.PAID:
            order.paid_at = timezone.now()
            update_fields.append('paid_at')
        order.save(update_fields=update_fields)

        logger.info(f"Order {order.order_number} payment {current} -> {new_status}")
        return order

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def refund_order(order_id, amount=None, reason: Optional[str] = '') -> Order:
        """
        Refund a paid order.

        Refunding an already refunded order returns it unchanged. Fulfillment
        status is never touched.
        """
        order = OrderStateService._lock(order_id)

        if order.payment_status == Payment.REFUNDED:
            logger.info(f"Order {order.order_number} already refunded")
            return order
        if order.payment_status != Payment.PAID:
            raise InvalidTransitionError(
                f"Cannot refund an order whose payment is {order.payment_status}",
                details={'from': order.payment_status, 'to': Payment.REFUNDED},
            )

        if amount is None:
            refund_amount = order.total_amount
        else:
            try:
                refund_amount = quantize_money(amount)
            except (InvalidOperation, ValueError, TypeError):
                raise ValidationError(f"Invalid refund amount: {amount}")
        if refund_amount <= Decimal('0') or refund_amount > order.total_amount:
            raise ValidationError(
                f"Refund amount must be greater than 0 and at most {order.total_amount}",
                details={'amount': str(refund_amount), 'total_amount': str(order.total_amount)},
            )

        order.payment_status = Payment.REFUNDED
        order.refund_amount = refund_amount
        order.refund_reason = reason or ''
        order.refunded_at = timezone.now()
        order.save(update_fields=['payment_status', 'refund_amount', 'refund_reason', 'refunded_at', 'updated_at'])

        logger.info(f"Order {order.order_number} refunded {refund_amount}")
        return order
