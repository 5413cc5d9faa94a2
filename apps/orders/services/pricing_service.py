"""
Cart pricing: line items, subtotal and shipping. No side effects.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from django.conf import settings

from apps.common.exceptions import ValidationError
from apps.common.utils import quantize_money
from apps.products.models import Product
from apps.products.services import CatalogService
from ..models import Order


@dataclass
class PricedLine:
    product: Product
    product_name: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal


@dataclass
class PricedCart:
    lines: List[PricedLine] = field(default_factory=list)
    subtotal: Decimal = Decimal('0.00')
    shipping_cost: Decimal = Decimal('0.00')
    delivery_area: str = Order.DeliveryArea.OUTSIDE_ZONE

    @property
    def total_before_discount(self) -> Decimal:
        return self.subtotal + self.shipping_cost


class PricingService:
    """Turns a cart into priced line items using current catalog prices"""

    @staticmethod
    def resolve_delivery_area(delivery_area: Optional[str]) -> str:
        area = delivery_area or settings.DEFAULT_DELIVERY_AREA
        if area not in Order.DeliveryArea.values:
            raise ValidationError(
                f"Unknown delivery area: {area}",
                details={'delivery_area': area, 'allowed': list(Order.DeliveryArea.values)},
            )
        return area

    @staticmethod
    def shipping_cost(delivery_area: str) -> Decimal:
        return quantize_money(settings.SHIPPING_RATES[delivery_area])

    @staticmethod
    def _parse_quantity(raw) -> int:
        if isinstance(raw, bool):
            raise ValidationError("Quantity must be a positive integer")
        if isinstance(raw, int):
            quantity = raw
        elif isinstance(raw, str) and raw.strip().isdigit():
            quantity = int(raw.strip())
        else:
            raise ValidationError("Quantity must be a positive integer")
        if quantity < 1:
            raise ValidationError("Quantity must be a positive integer")
        return quantity

    @staticmethod
    def price_cart(items: List[Dict], delivery_area: Optional[str] = None) -> PricedCart:
        """
        Price a cart of ``{'product_id', 'quantity'}`` entries.

        The whole cart is rejected if any entry is invalid; items are never
        dropped silently.
        """
        if not items:
            raise ValidationError("Order must contain at least one item")

        area = PricingService.resolve_delivery_area(delivery_area)

        parsed = []
        for index, item in enumerate(items):
            product_id = item.get('product_id') if isinstance(item, dict) else None
            if product_id is None:
                raise ValidationError(f"Item {index} is missing product_id", details={'index': index})
            try:
                product_id = int(product_id)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid product id: {product_id}", details={'index': index})
            parsed.append((product_id, PricingService._parse_quantity(item.get('quantity'))))

        products = CatalogService.get_products(pid for pid, _ in parsed)

        cart = PricedCart(delivery_area=area, shipping_cost=PricingService.shipping_cost(area))
        subtotal = Decimal('0.00')

        for product_id, quantity in parsed:
            product = products.get(product_id)
            if product is None:
                raise ValidationError(
                    f"Product {product_id} not found",
                    details={'product_id': product_id, 'reason': 'unknown_product'},
                )
            if not product.is_active:
                raise ValidationError(
                    f"Product {product.name} is not available",
                    details={'product_id': product_id, 'reason': 'inactive_product'},
                )

            unit_price = quantize_money(product.unit_price)
            line_subtotal = quantize_money(unit_price * quantity)
            cart.lines.append(PricedLine(
                product=product,
                product_name=product.name,
                unit_price=unit_price,
                quantity=quantity,
                subtotal=line_subtotal,
            ))
            subtotal += line_subtotal

        cart.subtotal = quantize_money(subtotal)
        return cart
