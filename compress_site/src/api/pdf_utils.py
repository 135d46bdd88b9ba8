# Shared PDF utilities
import base64
import binascii
import io

import fitz  # PyMuPDF
from PyPDF2 import PdfReader, PdfWriter

from src.exceptions import EncryptedPDFError, InvalidDataURIError, InvalidPDFError

from .logging_utils import get_logger

logger = get_logger(__name__)

PDF_DATA_URI_PREFIX = "data:application/pdf;base64,"


def is_pdf_data_uri(data_uri: str) -> bool:
    """Return True when ``data_uri`` carries the exact PDF data URI prefix."""
    return isinstance(data_uri, str) and data_uri.startswith(PDF_DATA_URI_PREFIX)


def encode_pdf_data_uri(pdf_bytes: bytes) -> str:
    """Wrap raw PDF bytes into a ``data:application/pdf;base64,`` URI."""
    return PDF_DATA_URI_PREFIX + base64.b64encode(pdf_bytes).decode("ascii")


def decode_pdf_data_uri(data_uri: str) -> bytes:
    """Decode a PDF data URI into raw bytes.

    Raises:
        InvalidDataURIError: The prefix is not the PDF data URI prefix.
        InvalidPDFError: The base64 payload cannot be decoded.
    """
    if not is_pdf_data_uri(data_uri):
        raise InvalidDataURIError()

    payload = data_uri[len(PDF_DATA_URI_PREFIX):]
    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError) as err:
        raise InvalidPDFError(f"Failed to decode PDF data: {err}") from err


def decoded_size_estimate(data_uri: str) -> int:
    """Byte length of the payload behind a base64 data URI, without decoding it."""
    _, _, payload = data_uri.partition(",")
    payload = payload.strip()
    padding = len(payload) - len(payload.rstrip("="))
    return max(0, len(payload) * 3 // 4 - padding)


def load_pdf_document(pdf_bytes: bytes, ignore_encryption: bool = True) -> fitz.Document:
    """Open PDF bytes as a PyMuPDF document.

    With ``ignore_encryption`` an encrypted file that opens with an empty user
    password (owner restrictions only) is loaded anyway. Files that need a real
    password are always rejected.

    Raises:
        InvalidPDFError: The bytes are not a readable PDF.
        EncryptedPDFError: The PDF is encrypted and cannot be opened.
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise InvalidPDFError(f"Failed to parse PDF document: {e}") from e

    if doc.needs_pass and not doc.authenticate(""):
        doc.close()
        raise EncryptedPDFError("Input document is encrypted and requires a password")

    encryption = (doc.metadata or {}).get("encryption")
    if encryption and not ignore_encryption:
        doc.close()
        raise EncryptedPDFError(
            "Input document is encrypted; "
            "load it with ignore_encryption=True to process it anyway"
        )

    if encryption:
        logger.debug("Loaded encrypted PDF (%s) with owner restrictions ignored", encryption)

    return doc


def is_encrypted(doc: fitz.Document) -> bool:
    return bool((doc.metadata or {}).get("encryption"))


def save_with_object_streams(doc: fitz.Document) -> bytes:
    """Serialize ``doc`` with object streams enabled.

    This only regroups indirect objects into compressed object streams; image
    data, fonts and page content streams are written back as they are.
    """
    return doc.tobytes(use_objstms=1)


def save_without_pages(pdf_bytes: bytes) -> bytes:
    """Rewrite a PDF that has no pages.

    MuPDF refuses to serialize page-less documents, so PyPDF2 clones the
    catalog and writes it back out instead.
    """
    reader = PdfReader(io.BytesIO(pdf_bytes), strict=False)
    if reader.is_encrypted:
        reader.decrypt("")
    writer = PdfWriter(clone_from=reader)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()
