"""
Custom exception handler for DRF

Every error leaves the API in one shape:
    {"success": false, "message": "..."}
with the HTTP status carried by the exception.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.db import IntegrityError
import logging

logger = logging.getLogger(__name__)


def flatten_detail(detail) -> str:
    """
    Collapse DRF's nested error detail into one message.

    {"email": ["Enter a valid email address."]} -> "email: Enter a valid email address."
    Only the first error is reported.
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = flatten_detail(value)
            if key in ('non_field_errors', 'detail'):
                return message
            return f"{key}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return flatten_detail(detail[0]) if detail else ''
    return str(detail)


def error_response(message: str, status_code: int) -> Response:
    return Response({'success': False, 'message': message}, status=status_code)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that:
    1. Logs unexpected exceptions
    2. Converts Django exceptions to DRF responses
    3. Provides the {success, message} error format
    """

    # Call DRF's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        detail = getattr(exc, 'detail', response.data)
        response.data = {
            'success': False,
            'message': flatten_detail(detail),
        }
        return response

    # Handle exceptions that DRF doesn't handle
    if isinstance(exc, IntegrityError):
        logger.warning(f"IntegrityError: {exc}")
        return error_response(
            'Data integrity error. This may be a duplicate entry.',
            status.HTTP_409_CONFLICT
        )

    if isinstance(exc, ValueError):
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST)

    # Log unexpected exceptions
    logger.exception(f"Unhandled exception: {exc}")

    return error_response(
        'An unexpected error occurred.',
        status.HTTP_500_INTERNAL_SERVER_ERROR
    )
