"""
Common utility functions for API responses and money handling
"""
from decimal import Decimal, ROUND_HALF_UP

from rest_framework.response import Response
from rest_framework import status

CENT = Decimal('0.01')


def quantize_money(value) -> Decimal:
    """Round a monetary value to cents, half-up"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": status_code,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def error_response(message="Error", errors=None, status_code=status.HTTP_400_BAD_REQUEST):
    """
    Standard error response format
    """
    response_data = {
        "code": status_code,
        "msg": message
    }
    if errors:
        response_data["errors"] = errors
    return Response(response_data, status=status_code)


def paginate(queryset, page, limit):
    """
    Slice a queryset by 1-based page number.

    Returns (items, pagination_dict).
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)
    total = queryset.count()
    start = (page - 1) * limit
    items = list(queryset[start:start + limit])
    return items, {
        'page': page,
        'limit': limit,
        'total': total,
        'pages': (total + limit - 1) // limit,
    }
