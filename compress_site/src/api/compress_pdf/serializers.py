# serializers.py
from rest_framework import serializers

from .actions import COMPRESSION_LEVELS, DEFAULT_COMPRESSION_LEVEL


class CompressPDFActionSerializer(serializers.Serializer):
    """Serializer for the data URI compression action."""

    # Blank and missing payloads are reported by the action itself.
    pdfDataUri = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        default="",
        help_text="PDF encoded as data:application/pdf;base64,<payload>.",
    )
    compressionLevel = serializers.ChoiceField(
        choices=list(COMPRESSION_LEVELS),
        default=DEFAULT_COMPRESSION_LEVEL,
        required=False,
        help_text="Compression level: extreme, recommended or less.",
    )


class CompressPDFActionResponseSerializer(serializers.Serializer):
    """Response body of the compression action (documentation only)."""

    compressedPdfDataUri = serializers.CharField(required=False)
    originalSize = serializers.IntegerField(required=False)
    compressedSize = serializers.IntegerField(required=False)
    error = serializers.CharField(required=False)
