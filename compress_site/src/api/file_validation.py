"""
File validation utilities for the compression action and page.
"""

import io
import os
import re

from .logging_utils import get_logger

logger = get_logger(__name__)


# Magic number for file type detection
PDF_MAGIC = b"%PDF"


def sanitize_filename(filename: str, max_length: int = 200) -> str:
    """
    Sanitize filename to remove problematic characters.

    Args:
        filename: Original filename
        max_length: Maximum filename length

    Returns:
        Sanitized filename
    """
    # Remove path components (both separators, browsers may send either)
    filename = os.path.basename(filename.replace("\\", "/"))

    # Keep alphanumeric, spaces, dots, hyphens, underscores
    filename = re.sub(r"[^\w\s\.\-]", "_", filename)
    filename = re.sub(r"[\s_]+", "_", filename)
    filename = filename.strip("._-")

    if not filename:
        filename = "file"

    if len(filename) > max_length:
        name, ext = os.path.splitext(filename)
        max_name_length = max_length - len(ext)
        filename = name[:max_name_length] + ext

    return filename


def count_pdf_pages(pdf_bytes: bytes) -> int:
    """Count pages with PyPDF2, independently of the library that wrote the file."""
    from PyPDF2 import PdfReader

    reader = PdfReader(io.BytesIO(pdf_bytes), strict=False)
    if reader.is_encrypted:
        reader.decrypt("")
    return len(reader.pages)


def validate_output_pdf(
    pdf_bytes: bytes,
    expected_pages: int | None = None,
    min_size: int = 100,
    context: dict | None = None,
) -> tuple[bool, str | None]:
    """
    Check a freshly written PDF and log anything that looks wrong.

    The result is informational: callers log it, they do not fail on it.

    Returns:
        Tuple[bool, Optional[str]]: (looks_valid, problem_description)
    """
    if context is None:
        context = {}

    if not pdf_bytes:
        logger.warning(
            "Output PDF is empty", extra={**context, "event": "empty_output_file"}
        )
        return False, "Output PDF is empty"

    if not pdf_bytes.startswith(PDF_MAGIC):
        logger.warning(
            "Output PDF is missing the PDF header",
            extra={**context, "event": "output_header_missing"},
        )
        return False, "Output PDF is missing the PDF header"

    if len(pdf_bytes) < min_size:
        logger.warning(
            "Output PDF is suspiciously small",
            extra={**context, "file_size": len(pdf_bytes), "event": "small_output_file"},
        )

    if expected_pages is None:
        return True, None

    try:
        page_count = count_pdf_pages(pdf_bytes)
    except Exception as e:
        logger.warning(
            "Output PDF could not be re-read",
            extra={**context, "error": str(e), "event": "output_reread_failed"},
        )
        return False, f"Output PDF could not be re-read: {e}"

    if page_count != expected_pages:
        logger.warning(
            "Output PDF page count differs from the source",
            extra={
                **context,
                "expected_pages": expected_pages,
                "actual_pages": page_count,
                "event": "page_count_mismatch",
            },
        )
        return False, f"Expected {expected_pages} pages, found {page_count}"

    return True, None
