"""
Analytics views module.
"""
from .analytics_views import RevenueTrendView, TopProductsView, DashboardView, InventoryReportView

__all__ = [
    'RevenueTrendView',
    'TopProductsView',
    'DashboardView',
    'InventoryReportView',
]
