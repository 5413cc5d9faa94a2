from django.contrib import admin
from django.utils.html import format_html

from .models import Coupon, CouponUsage
from .services import CouponService


class CouponUsageInline(admin.TabularInline):
    """Read-only redemption history"""
    model = CouponUsage
    extra = 0
    can_delete = False
    readonly_fields = ['order', 'user', 'discount_amount', 'used_at']
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = [
        'code', 'discount_display', 'min_purchase_amount', 'usage_display',
        'expiry_date', 'is_active'
    ]
    list_filter = ['is_active', 'expiry_date', 'created_at']
    search_fields = ['code', 'description']
    ordering = ['-created_at']
    readonly_fields = ['used_count', 'created_by', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('code', 'description', 'is_active')
        }),
        ('Discount', {
            'fields': ('discount_percentage', 'discount_amount', 'max_discount_amount', 'min_purchase_amount')
        }),
        ('Limits', {
            'fields': ('expiry_date', 'usage_limit', 'used_count')
        }),
        ('Audit', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    inlines = [CouponUsageInline]
    actions = ['deactivate_coupons']

    def discount_display(self, obj):
        if obj.discount_percentage is not None:
            return f"{obj.discount_percentage}%"
        return f"{obj.discount_amount} off"
    discount_display.short_description = 'Discount'

    def usage_display(self, obj):
        """Used count against the limit, red once exhausted"""
        limit = obj.usage_limit if obj.usage_limit is not None else '∞'
        color = '#dc3545' if obj.is_exhausted else '#28a745'
        return format_html('<span style="color: {};">{} / {}</span>', color, obj.used_count, limit)
    usage_display.short_description = 'Usage'

    def save_model(self, request, obj, form, change):
        obj.code = obj.code.strip().upper()
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    def deactivate_coupons(self, request, queryset):
        for coupon in queryset:
            CouponService.deactivate_coupon(coupon.pk)
        self.message_user(request, f'{queryset.count()} coupons deactivated.')
    deactivate_coupons.short_description = 'Deactivate selected coupons'
