"""
Catalog lookups and stock movements used by the order engine.
"""
import logging
from typing import Dict, Iterable

from django.db.models import F

from apps.common.exceptions import InsufficientStockError
from ..models import Product

logger = logging.getLogger(__name__)


class CatalogService:
    """Point-in-time product reads and conditional stock updates"""

    @staticmethod
    def get_products(product_ids: Iterable[int]) -> Dict[int, Product]:
        """Fetch products by id in one query, keyed by id"""
        return Product.objects.in_bulk(list(set(product_ids)))

    @staticmethod
    def reserve_stock(product: Product, quantity: int) -> None:
        """
        Decrement stock by quantity, failing if it would go negative.

        Must run inside the caller's transaction so a later failure restores it.
        """
        updated = Product.objects.filter(
            pk=product.pk,
            inventory__gte=quantity,
        ).update(
            inventory=F('inventory') - quantity,
            sold=F('sold') + quantity,
        )
        if not updated:
            logger.warning(f"Insufficient stock for product {product.pk}: requested {quantity}")
            raise InsufficientStockError(
                f"Insufficient stock for {product.name}",
                details={'product_id': product.pk, 'requested': quantity},
            )

    @staticmethod
    def release_stock(product_id: int, quantity: int) -> None:
        """Return stock taken by a cancelled order"""
        Product.objects.filter(pk=product_id).update(
            inventory=F('inventory') + quantity,
            sold=F('sold') - quantity,
        )
