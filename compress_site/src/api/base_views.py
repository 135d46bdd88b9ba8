"""
Base API view for JSON actions that take and return PDF data URIs.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from django.conf import settings
from django.http import HttpRequest
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .logging_utils import (
    build_request_context,
    get_logger,
    log_action_error,
    log_action_start,
    log_action_success,
    log_file_validation_error,
    log_validation_error,
)
from .pdf_utils import decoded_size_estimate

logger = get_logger(__name__)


class BaseActionAPIView(APIView, ABC):
    """Base class for data URI action endpoints.

    Provides common functionality:
    - Serializer validation
    - Payload size limit
    - Logging
    - Mapping of the action result to an HTTP response
    """

    MAX_UPLOAD_SIZE = getattr(settings, "MAX_UPLOAD_SIZE", 50 * 1024 * 1024)
    ACTION_TYPE = ""
    PAYLOAD_FIELD_NAME = "pdfDataUri"

    # error_type of a failed result -> HTTP status
    ERROR_STATUS = {
        "missing": status.HTTP_400_BAD_REQUEST,
        "format": status.HTTP_400_BAD_REQUEST,
        "invalid": status.HTTP_400_BAD_REQUEST,
        "encrypted": status.HTTP_400_BAD_REQUEST,
        "unexpected": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }

    def get_serializer_class(self):
        """Get serializer class. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement get_serializer_class()")

    @abstractmethod
    def perform_action(self, validated_data: Dict[str, Any], context: Dict[str, Any]):
        """Run the action.

        Returns:
            A result object exposing ``error``, ``error_type`` and ``to_dict()``.
        """
        raise NotImplementedError("Subclasses must implement perform_action()")

    def get_success_headers(self, result, validated_data: Dict[str, Any]) -> Dict[str, str]:
        """Extra response headers for a successful result. Override if needed."""
        return {}

    def validate_payload_size(
        self, payload: str, context: Dict[str, Any]
    ) -> Optional[Response]:
        """Reject payloads whose decoded size exceeds MAX_UPLOAD_SIZE.

        Returns:
            Response if validation failed, None if OK
        """
        if not payload:
            return None

        size = decoded_size_estimate(payload)
        context["payload_size"] = size
        if size > self.MAX_UPLOAD_SIZE:
            log_file_validation_error(
                logger,
                f"Payload size {size} exceeds maximum {self.MAX_UPLOAD_SIZE}",
                context,
                max_size=self.MAX_UPLOAD_SIZE,
            )
            return Response(
                {
                    "error": f"File too large. Maximum size is {self.MAX_UPLOAD_SIZE / (1024 * 1024):.0f} MB."
                },
                status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )
        return None

    def build_response(self, result, validated_data: Dict[str, Any]) -> Response:
        if result.error is not None:
            code = self.ERROR_STATUS.get(
                result.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR
            )
            return Response(result.to_dict(), status=code)

        response = Response(result.to_dict(), status=status.HTTP_200_OK)
        for header, value in self.get_success_headers(result, validated_data).items():
            response[header] = value
        return response

    def post(self, request: HttpRequest):
        """Handle POST request.

        1. Serializer validation
        2. Payload size validation
        3. Action
        4. Response

        Note: Swagger documentation decorator should be applied in subclasses.
        """
        context = build_request_context(request)

        serializer = self.get_serializer_class()(data=request.data)
        if not serializer.is_valid():
            log_validation_error(logger, serializer.errors, context)
            return Response(
                {"error": "Invalid request", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        validated_data = serializer.validated_data
        for key, value in validated_data.items():
            if key != self.PAYLOAD_FIELD_NAME:
                context[key] = value

        size_error = self.validate_payload_size(
            validated_data.get(self.PAYLOAD_FIELD_NAME) or "", context
        )
        if size_error is not None:
            return size_error

        start_time = log_action_start(logger, self.ACTION_TYPE, context)

        try:
            result = self.perform_action(validated_data, context)
        except Exception as e:
            # perform_action implementations report failures in the result;
            # anything raised here is a bug.
            log_action_error(
                logger, self.ACTION_TYPE, context, e, start_time, level="exception"
            )
            return Response(
                {"error": "Internal server error. Please try again later."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if result.error is not None:
            level = "error" if result.error_type == "unexpected" else "warning"
            log_action_error(
                logger,
                self.ACTION_TYPE,
                context,
                result.error,
                start_time,
                level=level,
                error_category=result.error_type,
            )
        else:
            log_action_success(logger, self.ACTION_TYPE, context, start_time)

        return self.build_response(result, validated_data)
