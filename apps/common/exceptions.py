"""
Service error taxonomy and the DRF exception handler that renders it.

Services raise these; views let them propagate and the handler turns them
into the standard ``{"code", "msg", "errors"}`` envelope.
"""
import functools
import logging

from django.db import InterfaceError, OperationalError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for failures reported to the caller"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request failed'
    error_code = 'error'

    def __init__(self, message=None, *, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def as_dict(self):
        data = {'type': self.code, 'detail': self.message}
        if self.details:
            data['details'] = self.details
        return data


class ValidationError(ServiceError):
    """Malformed or missing input. Never retried automatically."""
    default_message = 'Validation error'
    error_code = 'validation_error'


class InsufficientStockError(ValidationError):
    default_message = 'Insufficient stock'
    error_code = 'insufficient_stock'


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Resource not found'
    error_code = 'not_found'


class InvalidTransitionError(ServiceError):
    """Illegal state-machine move; the order is left unchanged"""
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Invalid status transition'
    error_code = 'invalid_transition'


class InvalidError(ServiceError):
    """Coupon is inactive, expired or below its minimum purchase"""
    default_message = 'Coupon is not valid'
    error_code = 'coupon_invalid'


class ExhaustedError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Coupon usage limit reached'
    error_code = 'coupon_exhausted'


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Conflicting resource'
    error_code = 'conflict'


class UnavailableError(ServiceError):
    """Store unavailable or timed out. Safe to retry, nothing was committed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'Service temporarily unavailable, please retry'
    error_code = 'unavailable'


def translate_store_errors(func):
    """
    Surface database connectivity failures and timeouts as UnavailableError.

    Apply to the outermost service call so the transaction has already been
    rolled back when the error reaches the caller.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Store failure in {func.__qualname__}: {e}", exc_info=True)
            raise UnavailableError() from e
    return wrapper


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error(f"Service unavailable: {exc}")
        else:
            logger.warning(f"Service error ({exc.code}): {exc}")
        response = Response({
            'code': exc.status_code,
            'msg': exc.message,
            'errors': exc.as_dict(),
        }, status=exc.status_code)
        if isinstance(exc, UnavailableError):
            response['Retry-After'] = '5'
        return response

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        logger.error(f"API Exception: {exc}", exc_info=True)

        custom_response_data = {
            'code': response.status_code,
            'msg': 'An error occurred',
            'errors': response.data
        }

        # Handle specific error types
        if response.status_code == status.HTTP_400_BAD_REQUEST:
            custom_response_data['msg'] = 'Validation error'
        elif response.status_code == status.HTTP_401_UNAUTHORIZED:
            custom_response_data['msg'] = 'Authentication required'
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            custom_response_data['msg'] = 'Permission denied'
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            custom_response_data['msg'] = 'Resource not found'
        elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            custom_response_data['msg'] = 'Method not allowed'

        response.data = custom_response_data

    return response
