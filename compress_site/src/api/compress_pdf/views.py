# views.py
from typing import Any, Dict

from .actions import DEFAULT_COMPRESSION_LEVEL, CompressPdfOutput, compress_pdf_action
from .decorators import compress_pdf_action_docs
from .serializers import CompressPDFActionSerializer
from ..base_views import BaseActionAPIView


class CompressPDFActionAPIView(BaseActionAPIView):
    """Handle compress PDF action requests."""

    ACTION_TYPE = "COMPRESS_PDF"
    PAYLOAD_FIELD_NAME = "pdfDataUri"

    def get_serializer_class(self):
        return CompressPDFActionSerializer

    @compress_pdf_action_docs()
    def post(self, request):
        return super().post(request)

    def perform_action(
        self, validated_data: Dict[str, Any], context: Dict[str, Any]
    ) -> CompressPdfOutput:
        return compress_pdf_action(
            validated_data.get("pdfDataUri", ""),
            validated_data.get("compressionLevel", DEFAULT_COMPRESSION_LEVEL),
        )

    def get_success_headers(
        self, result: CompressPdfOutput, validated_data: Dict[str, Any]
    ) -> Dict[str, str]:
        original, compressed = result.original_size, result.compressed_size
        ratio = ((original - compressed) / original * 100) if original > 0 else 0
        return {
            "X-Compression-Ratio": f"{ratio:.2f}",
            "X-Compression-Level": validated_data.get(
                "compressionLevel", DEFAULT_COMPRESSION_LEVEL
            ),
        }
