from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from apps.common.exceptions import ServiceError
from .models import Order, OrderItem
from .services import OrderStateService


class OrderItemInline(admin.TabularInline):
    """Inline admin for order item snapshots"""
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ['product', 'product_name', 'unit_price', 'quantity', 'subtotal']
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for orders; status changes go through the state machine"""

    list_display = [
        'order_number', 'shipping_name', 'fulfillment_display', 'payment_status',
        'total_amount', 'delivery_area', 'created_at', 'order_age'
    ]
    list_filter = ['fulfillment_status', 'payment_status', 'delivery_area', 'created_at']
    search_fields = ['order_number', 'shipping_name', 'shipping_email', 'shipping_phone']
    ordering = ['-created_at']
    readonly_fields = [
        'order_number', 'user', 'shipping_name', 'shipping_email', 'shipping_phone',
        'shipping_address', 'subtotal', 'shipping_cost', 'discount_amount',
        'total_amount', 'coupon', 'delivery_area', 'fulfillment_status',
        'payment_status', 'refund_amount', 'refund_reason', 'refunded_at',
        'created_at', 'updated_at', 'paid_at', 'shipped_at', 'delivered_at',
        'cancelled_at', 'order_age',
    ]

    fieldsets = (
        ('Basic Information', {
            'fields': ('order_number', 'user', 'remark')
        }),
        ('Shipping Contact', {
            'fields': ('shipping_name', 'shipping_email', 'shipping_phone', 'shipping_address', 'delivery_area')
        }),
        ('Amounts', {
            'fields': ('subtotal', 'shipping_cost', 'discount_amount', 'total_amount', 'coupon')
        }),
        ('Status', {
            'fields': ('fulfillment_status', 'payment_status')
        }),
        ('Timestamps & Age', {
            'fields': ('created_at', 'updated_at', 'paid_at', 'shipped_at', 'delivered_at', 'cancelled_at', 'order_age')
        }),
        ('Refund Information', {
            'fields': ('refund_amount', 'refund_reason', 'refunded_at'),
            'classes': ('collapse',)
        }),
    )

    inlines = [OrderItemInline]
    actions = ['mark_as_shipped', 'mark_as_delivered', 'cancel_orders']

    def has_delete_permission(self, request, obj=None):
        return False

    def fulfillment_display(self, obj):
        """Display fulfillment status with color coding"""
        colors = {
            Order.FulfillmentStatus.PENDING: '#ffc107',
            Order.FulfillmentStatus.SHIPPING: '#17a2b8',
            Order.FulfillmentStatus.DELIVERED: '#28a745',
            Order.FulfillmentStatus.CANCELLED: '#dc3545',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.fulfillment_status, '#000000'),
            obj.get_fulfillment_status_display(),
        )
    fulfillment_display.short_description = 'Fulfillment'
    fulfillment_display.admin_order_field = 'fulfillment_status'

    def order_age(self, obj):
        """Calculate and display order age"""
        if not obj.created_at:
            return '-'
        age = timezone.now() - obj.created_at
        if age.days > 0:
            return f"{age.days} days ago"
        elif age.seconds > 3600:
            return f"{age.seconds // 3600} hours ago"
        return f"{age.seconds // 60} minutes ago"
    order_age.short_description = 'Order Age'

    def _transition(self, request, queryset, new_status):
        updated_count = 0
        for order in queryset:
            try:
                OrderStateService.set_fulfillment_status(order.pk, new_status)
                updated_count += 1
            except ServiceError as e:
                self.message_user(request, f'{order.order_number}: {e.message}', level='warning')
        return updated_count

    def mark_as_shipped(self, request, queryset):
        count = self._transition(request, queryset, Order.FulfillmentStatus.SHIPPING)
        self.message_user(request, f'{count} orders marked as shipped.')
    mark_as_shipped.short_description = 'Mark as shipped'

    def mark_as_delivered(self, request, queryset):
        count = self._transition(request, queryset, Order.FulfillmentStatus.DELIVERED)
        self.message_user(request, f'{count} orders marked as delivered.')
    mark_as_delivered.short_description = 'Mark as delivered'

    def cancel_orders(self, request, queryset):
        count = self._transition(request, queryset, Order.FulfillmentStatus.CANCELLED)
        self.message_user(request, f'{count} orders cancelled.')
    cancel_orders.short_description = 'Cancel orders'
