"""
Middleware for consistent API error responses
"""

import logging
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .exceptions import ServiceError

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(MiddlewareMixin):
    """
    Error handling middleware that prevents information leakage.

    DRF views already render ServiceError through the exception handler; this
    covers plain Django views and anything that escapes them.
    """

    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            return None  # Let Django handle non-API errors normally

        if isinstance(exception, ServiceError):
            logger.warning(f"Service error in {request.path}: {exception}")
            return JsonResponse({
                'code': exception.status_code,
                'msg': exception.message,
                'errors': exception.as_dict(),
            }, status=exception.status_code)

        # Log the actual exception for debugging
        logger.error(f"Exception in {request.path}: {str(exception)}", exc_info=True)

        # Return generic error response without exposing internal details
        return JsonResponse({
            'code': 500,
            'msg': 'Internal server error, please retry later',
            'data': None
        }, status=500)
