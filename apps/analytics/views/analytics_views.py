"""
Admin analytics views.
"""
from datetime import timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import success_response, error_response
from ..services import AnalyticsService


def _date_range(request, default_days=30):
    """Parse ?start=YYYY-MM-DD&end=YYYY-MM-DD, defaulting to the last default_days"""
    today = timezone.localdate()
    start_raw = request.GET.get('start')
    end_raw = request.GET.get('end')

    start = parse_date(start_raw) if start_raw else today - timedelta(days=default_days)
    end = parse_date(end_raw) if end_raw else today
    if start is None or end is None:
        return None, None
    return start, end


def _int_param(request, name, default):
    try:
        return int(request.GET.get(name, default))
    except (TypeError, ValueError):
        return None


class RevenueTrendView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        start, end = _date_range(request)
        if start is None:
            return error_response("Dates must use the YYYY-MM-DD format")

        granularity = request.GET.get('granularity', 'day')
        dense = request.GET.get('dense') in ('1', 'true', 'True')
        trend = AnalyticsService.revenue_trend(start, end, granularity, dense=dense)
        return success_response({
            'start': start.isoformat(),
            'end': end.isoformat(),
            'granularity': granularity,
            'trend': trend,
        })


class TopProductsView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        start, end = _date_range(request)
        if start is None:
            return error_response("Dates must use the YYYY-MM-DD format")
        limit = _int_param(request, 'limit', 10)
        if limit is None:
            return error_response("limit must be an integer")

        products = AnalyticsService.top_products(start, end, limit)
        return success_response({
            'start': start.isoformat(),
            'end': end.isoformat(),
            'products': products,
        })


class DashboardView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        period = _int_param(request, 'period', 30)
        if period is None:
            return error_response("period must be an integer")
        return success_response(AnalyticsService.dashboard(period))


class InventoryReportView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        return success_response(AnalyticsService.inventory_report())
