"""
Central exception handler for the REST API.

Every error leaving a view is rendered with the same envelope::

    {"error": "<message>", "code": "<machine code>", "status": 404}

Validation errors add a ``details`` key carrying the per-field messages.
Anything DRF does not know how to handle is logged and answered with 500.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def _error_payload(message, code, status_code, details=None):
    payload = {
        'error': str(message),
        'code': str(code),
        'status': status_code,
    }
    if details:
        payload['details'] = details
    return payload


def api_exception_handler(exc, context):
    """Render domain, DRF and unexpected exceptions as JSON error envelopes."""
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled exception in %s",
            view.__class__.__name__ if view is not None else 'unknown view',
        )
        set_rollback()
        return Response(
            _error_payload('Internal server error', 'server_error',
                           status.HTTP_500_INTERNAL_SERVER_ERROR),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    data = response.data

    if isinstance(exc, ValidationError):
        response.data = _error_payload(
            'Invalid input.', 'invalid', response.status_code, details=data
        )
        return response

    if isinstance(data, dict) and 'detail' in data:
        detail = data['detail']
        code = data.get('code') or getattr(detail, 'code', None) or 'error'
        extra = {k: v for k, v in data.items() if k not in ('detail', 'code')}
        response.data = _error_payload(detail, code, response.status_code, details=extra)
    else:
        response.data = _error_payload(
            'Request failed.', 'error', response.status_code, details=data
        )

    if response.status_code >= 500:
        logger.error("API error %s: %s", response.status_code, response.data['error'])
    elif response.status_code == status.HTTP_403_FORBIDDEN:
        logger.warning("Access denied: %s", response.data['error'])

    return response
