"""
Project-wide DRF exception handler.

Every error leaves the API as ``{"error": str, "details"?: any}``. Domain
exceptions are mapped in the views; this handler covers what DRF raises
itself (validation, authentication, 404) and anything unexpected.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    NotAuthenticated,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _detail_message(data) -> str:
    if isinstance(data, dict) and 'detail' in data:
        return str(data['detail'])
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else 'view'
        )
        return Response(
            {'error': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {'error': 'Invalid input', 'details': response.data}
    elif isinstance(exc, NotAuthenticated):
        response.data = {'error': 'Missing or invalid authorization header'}
    elif isinstance(exc, AuthenticationFailed):
        response.data = {'error': 'Invalid or expired token'}
    else:
        response.data = {'error': _detail_message(response.data)}

    return response
