from django.db import models


class Product(models.Model):
    """Catalog product as seen by the order engine"""

    STATUS_CHOICES = [
        (1, 'Active'),
        (-1, 'Inactive'),
    ]

    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2, help_text="List price")
    discount_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        help_text="Discount price, charged instead of the list price when set"
    )
    description = models.TextField(blank=True, default='')

    status = models.IntegerField(choices=STATUS_CHOICES, default=1, help_text="1=active, -1=inactive")

    # Inventory and sales tracking
    inventory = models.PositiveIntegerField(default=0, help_text="Stock quantity")
    sold = models.PositiveIntegerField(default=0, help_text="Sold quantity")
    low_stock_threshold = models.PositiveIntegerField(default=10)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['status'], name='products_status_idx'),
            models.Index(fields=['created_at'], name='products_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gte=0), name='product_price_non_negative'),
        ]

    def __str__(self):
        return f"{self.name} (id: {self.id})"

    @property
    def is_active(self):
        return self.status == 1

    @property
    def unit_price(self):
        """Price charged per unit: the discount price when present, else list price"""
        if self.discount_price is not None:
            return self.discount_price
        return self.price
