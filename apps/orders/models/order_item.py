from django.db import models


class OrderItem(models.Model):
    """Frozen snapshot of one cart line at checkout"""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items',
        help_text="Empty once the product is removed from the catalog"
    )
    product_name = models.CharField(max_length=200)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, help_text="Price charged per unit")
    quantity = models.PositiveIntegerField()
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, help_text="unit_price * quantity")

    class Meta:
        db_table = 'order_items'
        indexes = [
            models.Index(fields=['product'], name='order_items_product_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"
