import logging
import traceback
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    MethodNotAllowed,
    ParseError,
    ValidationError,
)

from django.db import DatabaseError

from .exceptions import AggregateFailure, StoreError
from .response import standardized_response

logger = logging.getLogger(__name__)


class BaseAPIView(APIView):
    """Base class for all API views with common error handling and response formatting"""

    def _extract_error_message(self, detail):
        """
        Keep structured error payloads (dict/list) for serializer errors and
        normalize simple details to strings.
        """
        if isinstance(detail, (dict, list)):
            return detail
        return str(detail)

    def handle_exception(self, exc):
        """Standardized exception handling for all API views"""
        request = getattr(self, "request", None)
        method = getattr(request, "method", "UNKNOWN")
        path = getattr(request, "path", "UNKNOWN")

        if isinstance(exc, DatabaseError):
            logger.error("Store error on %s %s: %s", method, path, exc, exc_info=True)
            exc = StoreError()

        if isinstance(exc, MethodNotAllowed):
            return Response(
                standardized_response(
                    success=False,
                    error=str(exc)
                ),
                status=status.HTTP_405_METHOD_NOT_ALLOWED
            )

        if isinstance(exc, (ValidationError, ParseError)):
            logger.warning("Validation error on %s %s: %s", method, path, exc.detail)
            return Response(
                standardized_response(
                    success=False,
                    error=self._extract_error_message(exc.detail),
                    error_code="invalid_argument",
                ),
                status=status.HTTP_400_BAD_REQUEST
            )

        if isinstance(exc, AggregateFailure):
            logger.error(
                "Aggregate failure on %s %s (step=%s): %s",
                method,
                path,
                exc.step,
                exc.detail,
            )
            return Response(
                standardized_response(
                    success=False,
                    error=self._extract_error_message(exc.detail),
                    error_code=exc.default_code,
                    data={"step": exc.step},
                ),
                status=exc.status_code
            )

        if isinstance(exc, APIException):
            error_code = None
            if hasattr(exc, "get_codes"):
                try:
                    error_code = exc.get_codes()
                except (AttributeError, TypeError):
                    error_code = None

            logger.warning(
                "API exception on %s %s (status=%s, code=%s): %s",
                method,
                path,
                getattr(exc, "status_code", "unknown"),
                error_code,
                exc.detail,
            )
            return Response(
                standardized_response(
                    success=False,
                    error=self._extract_error_message(exc.detail),
                    error_code=error_code,
                ),
                status=exc.status_code
            )

        logger.error("Unexpected error on %s %s: %s", method, path, str(exc))
        logger.error(traceback.format_exc())

        return Response(
            standardized_response(
                success=False,
                error="An unexpected error occurred"
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
