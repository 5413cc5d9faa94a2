from django.urls import path
from . import views

urlpatterns = [
    path('revenue', views.RevenueTrendView.as_view(), name='analytics-revenue'),
    path('top-products', views.TopProductsView.as_view(), name='analytics-top-products'),
    path('dashboard', views.DashboardView.as_view(), name='analytics-dashboard'),
    path('inventory', views.InventoryReportView.as_view(), name='analytics-inventory'),
]
