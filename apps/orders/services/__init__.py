"""
Order services module.
"""
from .pricing_service import PricedCart, PricedLine, PricingService
from .order_service import OrderService
from .order_state_service import OrderStateService

__all__ = [
    'PricedCart',
    'PricedLine',
    'PricingService',
    'OrderService',
    'OrderStateService',
]
