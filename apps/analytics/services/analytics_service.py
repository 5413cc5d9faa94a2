"""
Read-only reporting over committed orders and the catalog.

Revenue only counts delivered orders and excludes shipping. Buckets are
computed in the configured TIME_ZONE.
"""
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, List

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Max, Sum
from django.db.models.functions import TruncDay, TruncMonth, TruncYear
from django.utils import timezone

from apps.common.exceptions import ValidationError, translate_store_errors
from apps.common.utils import quantize_money
from apps.orders.models import Order, OrderItem
from apps.products.models import Product

logger = logging.getLogger(__name__)

MONEY = DecimalField(max_digits=14, decimal_places=2)

GRANULARITIES = {
    'day': (TruncDay, '%Y-%m-%d'),
    'month': (TruncMonth, '%Y-%m'),
    'year': (TruncYear, '%Y'),
}


def _as_aware(value, end_of_day=False):
    if isinstance(value, str):
        raise ValidationError(f"Invalid date: {value}")
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.max if end_of_day else time.min)
    if timezone.is_naive(value):
        value = timezone.make_aware(value, timezone.get_current_timezone())
    return value


def _window(start, end):
    if start is None or end is None:
        raise ValidationError("Both start and end dates are required")
    start = _as_aware(start)
    end = _as_aware(end, end_of_day=True)
    if start > end:
        raise ValidationError("start must not be after end")
    return start, end


def _periods(start: datetime, end: datetime, granularity: str) -> List[date]:
    """Every bucket start between start and end, in local time"""
    current = timezone.localtime(start).date()
    last = timezone.localtime(end).date()

    if granularity == 'month':
        current = current.replace(day=1)
    elif granularity == 'year':
        current = current.replace(month=1, day=1)

    periods = []
    while current <= last:
        periods.append(current)
        if granularity == 'day':
            current += timedelta(days=1)
        elif granularity == 'month':
            current = (current.replace(day=28) + timedelta(days=4)).replace(day=1)
        else:
            current = current.replace(year=current.year + 1)
    return periods


class AnalyticsService:
    """Revenue, product and inventory reports"""

    @staticmethod
    def delivered_orders(start, end):
        return Order.objects.filter(
            fulfillment_status=Order.FulfillmentStatus.DELIVERED,
            created_at__range=(start, end),
        )

    @staticmethod
    @translate_store_errors
    def revenue_trend(start, end, granularity: str = 'day', dense: bool = False) -> List[Dict]:
        """
        Delivered revenue bucketed by day, month or year.

        Each bucket has ``period``, ``revenue`` (total minus shipping),
        ``order_count`` and ``avg_order_value``. With ``dense`` every period in
        the window is present, empty ones with zeros.
        """
        if granularity not in GRANULARITIES:
            raise ValidationError(
                f"Unknown granularity: {granularity}",
                details={'allowed': list(GRANULARITIES)},
            )
        start, end = _window(start, end)
        trunc, label_format = GRANULARITIES[granularity]
        tz = timezone.get_current_timezone()

        rows = AnalyticsService.delivered_orders(start, end).annotate(
            bucket=trunc('created_at', tzinfo=tz),
        ).values('bucket').annotate(
            revenue=Sum(
                ExpressionWrapper(F('total_amount') - F('shipping_cost'), output_field=MONEY),
                output_field=MONEY,
            ),
            order_count=Count('id'),
        ).order_by('bucket')

        buckets = {}
        for row in rows:
            label = timezone.localtime(row['bucket'], tz).strftime(label_format)
            revenue = quantize_money(row['revenue'] or 0)
            count = row['order_count']
            buckets[label] = {
                'period': label,
                'revenue': revenue,
                'order_count': count,
                'avg_order_value': quantize_money(revenue / count) if count else Decimal('0.00'),
            }

        if dense:
            for period in _periods(start, end, granularity):
                label = period.strftime(label_format)
                buckets.setdefault(label, {
                    'period': label,
                    'revenue': Decimal('0.00'),
                    'order_count': 0,
                    'avg_order_value': Decimal('0.00'),
                })

        return [buckets[label] for label in sorted(buckets)]

    @staticmethod
    @translate_store_errors
    def top_products(start, end, limit: int = 10) -> List[Dict]:
        """Best sellers among delivered orders, by quantity then revenue"""
        if int(limit) < 1:
            raise ValidationError("limit must be at least 1")
        start, end = _window(start, end)

        rows = OrderItem.objects.filter(
            order__fulfillment_status=Order.FulfillmentStatus.DELIVERED,
            order__created_at__range=(start, end),
        ).values('product').annotate(
            name=Max('product_name'),
            quantity_sold=Sum('quantity'),
            revenue=Sum('subtotal', output_field=MONEY),
            order_count=Count('order', distinct=True),
        ).order_by('-quantity_sold', '-revenue', 'product')[:int(limit)]

        return [
            {
                'product_id': row['product'],
                'product_name': row['name'],
                'quantity_sold': row['quantity_sold'],
                'revenue': quantize_money(row['revenue'] or 0),
                'order_count': row['order_count'],
            }
            for row in rows
        ]

    @staticmethod
    @translate_store_errors
    def dashboard(period_days: int = 30) -> Dict:
        """Headline numbers for the last period_days days"""
        if int(period_days) < 1:
            raise ValidationError("period_days must be at least 1")
        end = timezone.now()
        start = end - timedelta(days=int(period_days))

        delivered = AnalyticsService.delivered_orders(start, end).aggregate(
            revenue=Sum(
                ExpressionWrapper(F('total_amount') - F('shipping_cost'), output_field=MONEY),
                output_field=MONEY,
            ),
            order_count=Count('id'),
        )
        revenue = quantize_money(delivered['revenue'] or 0)
        delivered_count = delivered['order_count']

        status_counts = {value: 0 for value in Order.FulfillmentStatus.values}
        for row in Order.objects.filter(created_at__range=(start, end)).values(
            'fulfillment_status'
        ).annotate(count=Count('id')).order_by():
            status_counts[row['fulfillment_status']] = row['count']

        return {
            'period_days': int(period_days),
            'period_start': start,
            'period_end': end,
            'total_revenue': revenue,
            'delivered_orders': delivered_count,
            'total_orders': sum(status_counts.values()),
            'orders_by_status': status_counts,
            'avg_order_value': quantize_money(revenue / delivered_count) if delivered_count else Decimal('0.00'),
            'daily_revenue': AnalyticsService.revenue_trend(start, end, 'day', dense=True),
            'top_products': AnalyticsService.top_products(start, end, 10),
        }

    @staticmethod
    @translate_store_errors
    def inventory_report() -> Dict:
        """Active products running low or out of stock"""
        active = Product.objects.filter(status=1)
        fields = ('id', 'name', 'inventory', 'low_stock_threshold', 'sold')

        low_stock = list(active.filter(
            inventory__gt=0,
            inventory__lte=F('low_stock_threshold'),
        ).order_by('inventory', 'id').values(*fields))
        out_of_stock = list(active.filter(inventory=0).order_by('id').values(*fields))

        logger.debug(f"Inventory report: {len(low_stock)} low, {len(out_of_stock)} out of stock")
        return {
            'total_active_products': active.count(),
            'low_stock_count': len(low_stock),
            'out_of_stock_count': len(out_of_stock),
            'low_stock': low_stock,
            'out_of_stock': out_of_stock,
        }
