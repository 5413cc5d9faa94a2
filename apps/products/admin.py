from django.contrib import admin
from django.utils.html import format_html
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'name', 'price', 'discount_price', 'status',
        'inventory_status', 'sold'
    ]
    list_filter = ['status', 'created_at']
    search_fields = ['id', 'name', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at', 'sold']
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'name', 'description', 'status')
        }),
        ('Pricing', {
            'fields': ('price', 'discount_price')
        }),
        ('Inventory & Sales', {
            'fields': ('inventory', 'low_stock_threshold', 'sold')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    def inventory_status(self, obj):
        """Display inventory with low-stock colouring"""
        if obj.inventory == 0:
            color = '#dc3545'
        elif obj.inventory <= obj.low_stock_threshold:
            color = '#ffc107'
        else:
            color = '#28a745'
        return format_html('<span style="color: {};">{}</span>', color, obj.inventory)
    inventory_status.short_description = 'Inventory'
    inventory_status.admin_order_field = 'inventory'
