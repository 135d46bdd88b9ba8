"""
Base exceptions for the application.
"""

from typing import Any, Dict, Optional


class ConversionError(Exception):
    """Base exception for compression failures."""

    default_message = "An unexpected error occurred while compressing the PDF."

    def __init__(self, message: str = "", context: Optional[Dict[str, Any]] = None):
        """
        Args:
            message: Human-readable error message
            context: Additional context for logging (level, sizes, etc.)
        """
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class MissingPDFError(ConversionError):
    """Raised when no PDF payload was sent at all."""

    default_message = "No PDF file provided for compression."


class InvalidDataURIError(ConversionError):
    """Raised when the payload is not a ``data:application/pdf;base64,`` URI."""

    default_message = "Invalid PDF data format. Please ensure the file is a valid PDF."


class InvalidPDFError(ConversionError):
    """Raised when the payload cannot be decoded or parsed as a PDF."""


class EncryptedPDFError(InvalidPDFError):
    """Raised when a PDF is password-protected or encrypted."""

    default_message = (
        "The PDF is encrypted with restrictions that prevent modification. "
        "Please provide a decrypted PDF."
    )
