# actions.py
from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.exceptions import (
    ConversionError,
    EncryptedPDFError,
    InvalidDataURIError,
    InvalidPDFError,
    MissingPDFError,
)

from ..file_validation import validate_output_pdf
from ..logging_utils import get_logger
from ..pdf_utils import (
    decode_pdf_data_uri,
    encode_pdf_data_uri,
    is_encrypted,
    is_pdf_data_uri,
    load_pdf_document,
    save_with_object_streams,
    save_without_pages,
)

logger = get_logger(__name__)

COMPRESSION_LEVELS = ("extreme", "recommended", "less")
DEFAULT_COMPRESSION_LEVEL = "recommended"

ENCRYPTED_PDF_MESSAGE = EncryptedPDFError.default_message
UNEXPECTED_ERROR_MESSAGE = ConversionError.default_message


@dataclass(frozen=True)
class CompressPdfOutput:
    """Result of :func:`compress_pdf_action`.

    Either ``error`` is set, or all three success fields are. ``error_type``
    names the failure category for callers that map it to a status code; it
    is not part of the wire format.
    """

    compressed_pdf_data_uri: Optional[str] = None
    original_size: Optional[int] = None
    compressed_size: Optional[int] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return (
            self.error is None
            and self.compressed_pdf_data_uri is not None
            and self.original_size is not None
            and self.compressed_size is not None
        )

    @classmethod
    def failure(cls, message: str, error_type: str = "unexpected") -> "CompressPdfOutput":
        return cls(error=message, error_type=error_type)

    def to_dict(self) -> Dict[str, Any]:
        """Wire format: camelCase keys, unset fields omitted."""
        if self.error is not None:
            return {"error": self.error}
        return {
            "compressedPdfDataUri": self.compressed_pdf_data_uri,
            "originalSize": self.original_size,
            "compressedSize": self.compressed_size,
        }


def error_message_for(error: Exception) -> str:
    """Turn a failure into the message shown to the user.

    Messages that talk about encryption are replaced by a fixed explanation,
    unless they point at the ``ignore_encryption`` load flag.
    """
    message = str(error) if error is not None else ""
    lowered = message.lower()
    if "encrypted" in lowered and "ignore_encryption" not in lowered:
        return ENCRYPTED_PDF_MESSAGE
    return message or UNEXPECTED_ERROR_MESSAGE


def error_type_for(error: Exception) -> str:
    if isinstance(error, MissingPDFError):
        return "missing"
    if error_message_for(error) == ENCRYPTED_PDF_MESSAGE:
        return "encrypted"
    if isinstance(error, InvalidDataURIError):
        return "format"
    if isinstance(error, InvalidPDFError):
        return "invalid"
    return "unexpected"


def compress_pdf_action(
    pdf_data_uri: Optional[str],
    compression_level: str = DEFAULT_COMPRESSION_LEVEL,
) -> CompressPdfOutput:
    """Re-save a PDF data URI with object streams enabled.

    ``compression_level`` is accepted and logged, but every level produces the
    same output: the only transformation is object stream packing.

    Never raises; failures come back as ``CompressPdfOutput(error=...)``.
    """
    context = {"function": "compress_pdf_action", "compression_level": compression_level}

    try:
        if not pdf_data_uri:
            raise MissingPDFError()

        if not is_pdf_data_uri(pdf_data_uri):
            logger.error(
                "Invalid data URI format for compress PDF: %s",
                pdf_data_uri[:100],
                extra={**context, "event": "invalid_data_uri"},
            )
            return CompressPdfOutput.failure(InvalidDataURIError.default_message, "format")

        pdf_bytes = decode_pdf_data_uri(pdf_data_uri)
        original_size = len(pdf_bytes)
        context["original_size"] = original_size

        doc = load_pdf_document(pdf_bytes, ignore_encryption=True)
        try:
            page_count = doc.page_count
            context["page_count"] = page_count
            context["encrypted"] = is_encrypted(doc)

            logger.info(
                "Compression action called with level: %s",
                compression_level,
                extra={**context, "event": "compress_start"},
            )

            if page_count == 0:
                # MuPDF refuses to write a document without pages
                logger.warning(
                    "Original PDF had no pages.",
                    extra={**context, "event": "empty_source"},
                )
                compressed_bytes = save_without_pages(pdf_bytes)
            else:
                compressed_bytes = save_with_object_streams(doc)
        finally:
            doc.close()

        compressed_size = len(compressed_bytes)

        if compressed_size == 0 and page_count > 0:
            logger.warning(
                "Compression resulted in an empty PDF document, but original had pages.",
                extra={**context, "event": "empty_output"},
            )
        elif compressed_size:
            validate_output_pdf(compressed_bytes, expected_pages=page_count, context=context)

        logger.info(
            "PDF compression finished",
            extra={
                **context,
                "event": "compress_success",
                "compressed_size": compressed_size,
            },
        )

        return CompressPdfOutput(
            compressed_pdf_data_uri=encode_pdf_data_uri(compressed_bytes),
            original_size=original_size,
            compressed_size=compressed_size,
        )

    except Exception as e:
        if isinstance(e, ConversionError):
            logger.warning(
                "Error compressing PDF: %s",
                e,
                extra={**context, "event": "compress_error", "error_type": type(e).__name__},
            )
        else:
            logger.exception(
                "Error compressing PDF",
                extra={**context, "event": "compress_error", "error_type": type(e).__name__},
            )
        return CompressPdfOutput.failure(error_message_for(e), error_type_for(e))
