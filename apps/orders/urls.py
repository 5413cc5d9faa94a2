from django.urls import path
from . import views

urlpatterns = [
    # Customer endpoints
    path('create', views.CreateOrderView.as_view(), name='create-order'),
    path('my', views.MyOrdersView.as_view(), name='my-orders'),

    # Admin endpoints
    path('admin/all', views.AdminOrderListView.as_view(), name='admin-order-list'),
    path('admin/<int:order_id>', views.AdminOrderDetailView.as_view(), name='admin-order-detail'),
    path('admin/<int:order_id>/status', views.AdminOrderStatusView.as_view(), name='admin-order-status'),
    path('admin/<int:order_id>/payment-status', views.AdminPaymentStatusView.as_view(), name='admin-order-payment-status'),
    path('admin/<int:order_id>/refund', views.AdminRefundOrderView.as_view(), name='admin-order-refund'),
    path('admin/<int:order_id>/invoice', views.AdminOrderInvoiceView.as_view(), name='admin-order-invoice'),
]
