"""
API errors raised by services and views

Each class carries its HTTP status and default message. They are rendered
as {"success": false, "message": "..."} by handlers.custom_exception_handler.
"""
from rest_framework.exceptions import APIException
from rest_framework import status


class ApiError(APIException):
    """Base class for errors raised by services and views."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Something went wrong.'
    default_code = 'error'


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request.'
    default_code = 'invalid'


class MissingCredentials(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Please enter email and password'
    default_code = 'missing_credentials'


class DuplicateEmail(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This email already exists'
    default_code = 'duplicate_email'


class InvalidCredentials(ApiError):
    # Same message for unknown email and wrong password
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid email or password'
    default_code = 'invalid_credentials'


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Please login to continue'
    default_code = 'unauthenticated'


class InvalidToken(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid token'
    default_code = 'invalid_token'


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class ReplyNotFound(ApiError):
    # Nested reply insertion reports a missing parent reply as 401
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Reply not found'
    default_code = 'reply_not_found'


class UpstreamFailure(ApiError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Upstream service failed'
    default_code = 'upstream_failure'


class RouteNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Route not found'
    default_code = 'route_not_found'
