"""
Tests for revenue trends, top products and inventory reports
"""
from datetime import date, datetime
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from apps.analytics.services import AnalyticsService
from apps.common.exceptions import ValidationError
from tests.factories import OrderFactory, OrderItemFactory, ProductFactory, backdate


def local(*args):
    return timezone.make_aware(datetime(*args), timezone.get_current_timezone())


def delivered_order(created_at, total, shipping=Decimal('60.00'), **kwargs):
    order = OrderFactory(
        subtotal=total - shipping,
        shipping_cost=shipping,
        total_amount=total,
        fulfillment_status='delivered',
        **kwargs,
    )
    return backdate(order, created_at)


class TestRevenueTrend(TestCase):

    def test_daily_revenue_excludes_shipping(self):
        delivered_order(local(2024, 3, 10, 11, 0), Decimal('500.00'))
        delivered_order(local(2024, 3, 10, 18, 30), Decimal('300.00'))

        trend = AnalyticsService.revenue_trend(date(2024, 3, 10), date(2024, 3, 10))

        self.assertEqual(len(trend), 1)
        bucket = trend[0]
        self.assertEqual(bucket['period'], '2024-03-10')
        self.assertEqual(bucket['revenue'], Decimal('680.00'))
        self.assertEqual(bucket['order_count'], 2)
        self.assertEqual(bucket['avg_order_value'], Decimal('340.00'))

    def test_only_delivered_orders_count(self):
        delivered_order(local(2024, 3, 10, 9, 0), Decimal('500.00'))
        for status in ('pending', 'shipping', 'cancelled'):
            backdate(OrderFactory(fulfillment_status=status), local(2024, 3, 10, 10, 0))

        trend = AnalyticsService.revenue_trend(date(2024, 3, 10), date(2024, 3, 10))

        self.assertEqual(trend[0]['order_count'], 1)
        self.assertEqual(trend[0]['revenue'], Decimal('440.00'))

    def test_buckets_use_local_time(self):
        # 00:30 local is still the previous day in UTC
        delivered_order(local(2024, 3, 11, 0, 30), Decimal('160.00'))

        trend = AnalyticsService.revenue_trend(date(2024, 3, 10), date(2024, 3, 11))

        self.assertEqual([b['period'] for b in trend], ['2024-03-11'])

    def test_dense_mode_fills_empty_buckets(self):
        delivered_order(local(2024, 3, 10, 12, 0), Decimal('500.00'))

        trend = AnalyticsService.revenue_trend(date(2024, 3, 9), date(2024, 3, 11), dense=True)

        self.assertEqual([b['period'] for b in trend], ['2024-03-09', '2024-03-10', '2024-03-11'])
        empty = trend[0]
        self.assertEqual(empty['revenue'], Decimal('0.00'))
        self.assertEqual(empty['order_count'], 0)
        self.assertEqual(empty['avg_order_value'], Decimal('0.00'))

    def test_sparse_mode_skips_empty_buckets(self):
        delivered_order(local(2024, 3, 10, 12, 0), Decimal('500.00'))
        trend = AnalyticsService.revenue_trend(date(2024, 3, 9), date(2024, 3, 11))
        self.assertEqual([b['period'] for b in trend], ['2024-03-10'])

    def test_monthly_and_yearly_buckets(self):
        delivered_order(local(2023, 12, 31, 20, 0), Decimal('200.00'))
        delivered_order(local(2024, 1, 5, 10, 0), Decimal('300.00'))
        delivered_order(local(2024, 2, 1, 10, 0), Decimal('400.00'))

        monthly = AnalyticsService.revenue_trend(date(2023, 12, 1), date(2024, 2, 29), 'month')
        self.assertEqual([b['period'] for b in monthly], ['2023-12', '2024-01', '2024-02'])
        self.assertEqual(monthly[1]['revenue'], Decimal('240.00'))

        yearly = AnalyticsService.revenue_trend(date(2023, 1, 1), date(2024, 12, 31), 'year')
        self.assertEqual([b['period'] for b in yearly], ['2023', '2024'])
        self.assertEqual(yearly[1]['revenue'], Decimal('580.00'))
        self.assertEqual(yearly[1]['order_count'], 2)

    def test_dense_months(self):
        trend = AnalyticsService.revenue_trend(date(2024, 11, 15), date(2025, 2, 3), 'month', dense=True)
        self.assertEqual([b['period'] for b in trend], ['2024-11', '2024-12', '2025-01', '2025-02'])

    def test_window_edges_inclusive(self):
        delivered_order(local(2024, 3, 1, 0, 0), Decimal('100.00'))
        delivered_order(local(2024, 3, 31, 23, 59), Decimal('100.00'))
        delivered_order(local(2024, 4, 1, 0, 0), Decimal('100.00'))

        trend = AnalyticsService.revenue_trend(date(2024, 3, 1), date(2024, 3, 31), 'month')

        self.assertEqual(trend[0]['order_count'], 2)

    def test_invalid_arguments(self):
        with self.assertRaises(ValidationError):
            AnalyticsService.revenue_trend(date(2024, 3, 1), date(2024, 3, 31), 'week')
        with self.assertRaises(ValidationError):
            AnalyticsService.revenue_trend(date(2024, 3, 31), date(2024, 3, 1))


class TestTopProducts(TestCase):

    def test_sorted_by_quantity_then_revenue(self):
        tea = ProductFactory(name='Tea')
        honey = ProductFactory(name='Honey')
        rice = ProductFactory(name='Rice')
        order = delivered_order(local(2024, 5, 2, 12, 0), Decimal('1000.00'))
        other = delivered_order(local(2024, 5, 3, 12, 0), Decimal('1000.00'))

        OrderItemFactory(order=order, product=tea, unit_price=Decimal('10.00'), quantity=5)
        OrderItemFactory(order=other, product=tea, unit_price=Decimal('10.00'), quantity=1)
        OrderItemFactory(order=order, product=honey, unit_price=Decimal('50.00'), quantity=6)
        OrderItemFactory(order=order, product=rice, unit_price=Decimal('20.00'), quantity=2)

        top = AnalyticsService.top_products(date(2024, 5, 1), date(2024, 5, 31), limit=2)

        self.assertEqual([p['product_name'] for p in top], ['Honey', 'Tea'])
        self.assertEqual(top[0]['quantity_sold'], 6)
        self.assertEqual(top[0]['revenue'], Decimal('300.00'))
        self.assertEqual(top[1]['quantity_sold'], 6)
        self.assertEqual(top[1]['revenue'], Decimal('60.00'))
        self.assertEqual(top[1]['order_count'], 2)

    def test_ignores_undelivered_and_out_of_window(self):
        product = ProductFactory(name='Mango')
        pending = backdate(OrderFactory(), local(2024, 5, 2, 12, 0))
        old = delivered_order(local(2024, 4, 30, 12, 0), Decimal('100.00'))
        OrderItemFactory(order=pending, product=product, quantity=3)
        OrderItemFactory(order=old, product=product, quantity=3)

        self.assertEqual(AnalyticsService.top_products(date(2024, 5, 1), date(2024, 5, 31)), [])

    def test_limit_must_be_positive(self):
        with self.assertRaises(ValidationError):
            AnalyticsService.top_products(date(2024, 5, 1), date(2024, 5, 31), limit=0)


class TestDashboardAndInventory(TestCase):

    def test_dashboard_summary(self):
        now = timezone.now()
        delivered_order(now, Decimal('500.00'))
        delivered_order(now, Decimal('300.00'))
        OrderFactory(fulfillment_status='pending')

        dashboard = AnalyticsService.dashboard(7)

        self.assertEqual(dashboard['total_revenue'], Decimal('680.00'))
        self.assertEqual(dashboard['delivered_orders'], 2)
        self.assertEqual(dashboard['total_orders'], 3)
        self.assertEqual(dashboard['orders_by_status']['pending'], 1)
        self.assertEqual(dashboard['orders_by_status']['cancelled'], 0)
        self.assertEqual(dashboard['avg_order_value'], Decimal('340.00'))
        self.assertEqual(sum(day['revenue'] for day in dashboard['daily_revenue']), Decimal('680.00'))

    def test_inventory_report(self):
        ProductFactory(name='Plenty', inventory=100, low_stock_threshold=10)
        ProductFactory(name='Few', inventory=3, low_stock_threshold=5)
        ProductFactory(name='Edge', inventory=5, low_stock_threshold=5)
        ProductFactory(name='None', inventory=0)
        ProductFactory(name='Hidden', inventory=0, status=-1)

        report = AnalyticsService.inventory_report()

        self.assertEqual([p['name'] for p in report['low_stock']], ['Few', 'Edge'])
        self.assertEqual([p['name'] for p in report['out_of_stock']], ['None'])
        self.assertEqual(report['total_active_products'], 4)
