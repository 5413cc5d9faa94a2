"""
Order views module.
"""
from .order_views import CreateOrderView, MyOrdersView
from .admin_order_views import (
    AdminOrderListView, AdminOrderDetailView, AdminOrderStatusView,
    AdminPaymentStatusView, AdminRefundOrderView, AdminOrderInvoiceView
)

__all__ = [
    'CreateOrderView',
    'MyOrdersView',
    'AdminOrderListView',
    'AdminOrderDetailView',
    'AdminOrderStatusView',
    'AdminPaymentStatusView',
    'AdminRefundOrderView',
    'AdminOrderInvoiceView',
]
