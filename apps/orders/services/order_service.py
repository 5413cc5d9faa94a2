"""
Core order service for order creation and queries.
"""
import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q

from apps.common.exceptions import ConflictError, NotFoundError, ValidationError, translate_store_errors
from apps.common.utils import paginate
from apps.coupons.services import CouponService
from apps.products.services import CatalogService
from ..models import Order, OrderItem
from .pricing_service import PricingService

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = ('name', 'email', 'phone', 'address')


class OrderService:
    """Service class for core order business logic"""

    @staticmethod
    def generate_order_number() -> str:
        """Random order number: prefix plus 48 bits of hex"""
        return f"{settings.ORDER_NUMBER_PREFIX}-{uuid.uuid4().hex[:12].upper()}"

    @staticmethod
    def validate_customer_info(customer_info: Optional[Dict]) -> Dict:
        customer_info = customer_info or {}
        missing = [
            name for name in CUSTOMER_FIELDS
            if not str(customer_info.get(name) or '').strip()
        ]
        if missing:
            raise ValidationError(
                f"Missing customer information: {', '.join(missing)}",
                details={'missing': missing},
            )
        return {name: str(customer_info[name]).strip() for name in CUSTOMER_FIELDS}

    @staticmethod
    def _insert_order(**fields) -> Order:
        """
        Insert an order under a freshly drawn order number.

        Each attempt runs in its own savepoint so a collision on the unique
        order_number leaves the outer transaction usable.
        """
        attempts = settings.ORDER_NUMBER_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            order_number = OrderService.generate_order_number()
            try:
                with transaction.atomic():
                    return Order.objects.create(order_number=order_number, **fields)
            except IntegrityError:
                if Order.objects.filter(order_number=order_number).exists():
                    logger.warning(f"Order number collision on {order_number} (attempt {attempt}/{attempts})")
                    continue
                raise
        raise ConflictError(
            "Could not allocate a unique order number, please retry",
            code='order_number_conflict',
        )

    @staticmethod
    @translate_store_errors
    @transaction.atomic
    def create_order(
        customer_info: Dict,
        cart_items: List[Dict],
        delivery_area: Optional[str] = None,
        user=None,
        coupon_code: Optional[str] = None,
        remark: str = '',
    ) -> Order:
        """
        Price a cart, reserve stock, redeem the coupon and persist the order.

        Everything happens in one transaction: any failure leaves no order,
        no order items, no coupon usage and the stock untouched.
        """
        customer = OrderService.validate_customer_info(customer_info)
        cart = PricingService.price_cart(cart_items, delivery_area)

        coupon = None
        discount = Decimal('0.00')
        if coupon_code:
            coupon = CouponService.get_by_code(coupon_code)
            CouponService.check_eligibility(coupon, cart.subtotal)
            discount = CouponService.calculate_discount(coupon, cart.subtotal)

        for line in cart.lines:
            CatalogService.reserve_stock(line.product, line.quantity)

        order = OrderService._insert_order(
            user=user if user is not None and user.is_authenticated else None,
            shipping_name=customer['name'],
            shipping_email=customer['email'],
            shipping_phone=customer['phone'],
            shipping_address=customer['address'],
            subtotal=cart.subtotal,
            shipping_cost=cart.shipping_cost,
            discount_amount=discount,
            total_amount=cart.total_before_discount - discount,
            delivery_area=cart.delivery_area,
            coupon=coupon,
            remark=remark or '',
        )

        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=line.product,
                product_name=line.product_name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                subtotal=line.subtotal,
            )
            for line in cart.lines
        ])

        if coupon is not None:
            CouponService.redeem(coupon, order, user, cart.subtotal)

        logger.info(
            f"Order {order.order_number} created: {len(cart.lines)} items, "
            f"subtotal {order.subtotal}, shipping {order.shipping_cost}, "
            f"discount {order.discount_amount}, total {order.total_amount}"
        )
        return order

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.select_related('coupon', 'user').prefetch_related('items').get(pk=order_id)
        except (Order.DoesNotExist, ValueError):
            raise NotFoundError("Order not found", code='order_not_found')

    @staticmethod
    def list_user_orders(user, status: Optional[str] = None) -> List[Order]:
        queryset = Order.objects.filter(user=user).prefetch_related('items').select_related('coupon')
        if status:
            queryset = queryset.filter(fulfillment_status=status)
        return list(queryset.order_by('-created_at'))

    @staticmethod
    def list_orders(filters: Optional[Dict] = None, page: int = 1, limit: int = 20) -> Tuple[List[Order], Dict]:
        """Admin order listing with status filters and free-text search"""
        filters = filters or {}
        queryset = Order.objects.select_related('coupon', 'user').prefetch_related('items')

        if filters.get('fulfillment_status'):
            queryset = queryset.filter(fulfillment_status=filters['fulfillment_status'])
        if filters.get('payment_status'):
            queryset = queryset.filter(payment_status=filters['payment_status'])
        if filters.get('search'):
            term = filters['search'].strip()
            queryset = queryset.filter(
                Q(order_number__icontains=term)
                | Q(shipping_name__icontains=term)
                | Q(shipping_email__icontains=term)
            )

        return paginate(queryset.order_by('-created_at'), page, limit)

    @staticmethod
    def build_invoice(order_id) -> Dict:
        order = OrderService.get_order(order_id)
        return {
            'order_number': order.order_number,
            'order_date': order.created_at,
            'customer': {
                'name': order.shipping_name,
                'email': order.shipping_email,
                'phone': order.shipping_phone,
                'address': order.shipping_address,
            },
            'items': [
                {
                    'product_name': item.product_name,
                    'quantity': item.quantity,
                    'unit_price': item.unit_price,
                    'subtotal': item.subtotal,
                }
                for item in order.items.all()
            ],
            'subtotal': order.subtotal,
            'shipping_cost': order.shipping_cost,
            'discount_amount': order.discount_amount,
            'total_amount': order.total_amount,
            'coupon_code': order.coupon.code if order.coupon_id else None,
            'delivery_area': order.delivery_area,
            'fulfillment_status': order.fulfillment_status,
            'payment_status': order.payment_status,
        }
