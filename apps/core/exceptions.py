"""
Base exception hierarchy shared by all domain services.

Every service-level error derives from ``DomainError``, which is a DRF
``APIException``. Raising one from a service is enough for the central
exception handler to answer with the right status code and error code;
views never translate them by hand.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class DomainError(APIException):
    """Base exception for business rule errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request could not be processed.'
    default_code = 'domain_error'


class NotFoundError(DomainError):
    """Requested resource does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class AccessDeniedError(DomainError):
    """Caller is not allowed to touch the resource."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'access_denied'


class InvalidOperationError(DomainError):
    """Request is well formed but breaks a business rule."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid operation.'
    default_code = 'invalid_operation'


class UnprocessableError(DomainError):
    """Submitted data is consistent in shape but not in content."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = 'Unprocessable data.'
    default_code = 'unprocessable'


class AuthenticationError(DomainError):
    """Credentials or tokens were rejected."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication failed.'
    default_code = 'authentication_failed'
