# decorators.py
from typing import Callable

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from .serializers import CompressPDFActionResponseSerializer, CompressPDFActionSerializer


def compress_pdf_action_docs() -> Callable:
    """Decorator providing Swagger documentation for the compress PDF action."""

    error_schema = openapi.Schema(
        type=openapi.TYPE_OBJECT,
        properties={"error": openapi.Schema(type=openapi.TYPE_STRING)},
    )

    def decorator(func: Callable) -> Callable:
        return swagger_auto_schema(
            operation_description="Re-save a PDF sent as a base64 data URI with object "
            "streams enabled. The compression level is accepted for every request "
            "but does not change the output.",
            request_body=CompressPDFActionSerializer,
            responses={
                200: CompressPDFActionResponseSerializer,
                400: openapi.Response(
                    description="Missing payload, wrong data URI prefix, "
                    "unreadable or encrypted PDF.",
                    schema=error_schema,
                ),
                413: openapi.Response(description="File too large.", schema=error_schema),
                500: openapi.Response(
                    description="Unexpected compression failure.", schema=error_schema
                ),
            },
        )(func)

    return decorator
