"""
DRF exception handler mapping service errors to HTTP responses.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import NotFoundError, PermissionDeniedError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Translates ValidationError -> 400, PermissionDeniedError -> 403, NotFoundError -> 404 and
    StorageError / DatabaseError -> 500, using the same {'error': ...}
    body the views use for their own client errors.
    Everything else is left to DRF's default handler.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown view'

    if isinstance(exc, ValidationError):
        return Response({'error': exc.message}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, DjangoValidationError):
        # Raised by model fields, e.g. a malformed UUID in a lookup
        return Response({'error': '; '.join(exc.messages)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, PermissionDeniedError):
        return Response({'error': exc.message}, status=status.HTTP_403_FORBIDDEN)

    if isinstance(exc, NotFoundError):
        return Response({'error': exc.message}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, StorageError):
        logger.error(f"Storage error in {view_name}: {exc.message}")
        return Response({'error': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, DatabaseError):
        logger.error(f"Database error in {view_name}: {str(exc)}")
        return Response({'error': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return exception_handler(exc, context)
