"""File helpers for the compression page: reading uploads into data URIs and
turning data URIs back into downloads."""

import base64
import binascii
import io

from django.core.files.uploadedfile import UploadedFile
from django.http import FileResponse

DEFAULT_MIME_TYPE = "application/octet-stream"


class FileReadError(Exception):
    """Raised when an uploaded file cannot be read into memory."""


def read_file_as_data_uri(uploaded_file: UploadedFile) -> str:
    """Read an uploaded file into ``data:<content type>;base64,<payload>``.

    The media type is the one the browser reported for the file, so a PDF
    uploaded as ``application/octet-stream`` keeps that type.
    """
    content_type = getattr(uploaded_file, "content_type", None) or DEFAULT_MIME_TYPE
    try:
        uploaded_file.seek(0)
        content = b"".join(uploaded_file.chunks())
    except (OSError, ValueError) as err:
        raise FileReadError(f"Failed to read file: {err}") from err

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def split_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Return ``(mime_type, raw_bytes)`` for a base64 data URI."""
    header, sep, payload = data_uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI")
    mime_type = header[len("data:"):-len(";base64")] or DEFAULT_MIME_TYPE
    try:
        return mime_type, base64.b64decode(payload)
    except binascii.Error as err:
        raise ValueError(f"Invalid base64 payload: {err}") from err


def build_download_response(data_uri: str, filename: str) -> FileResponse:
    """Stream a data URI back to the browser as an attachment."""
    mime_type, content = split_data_uri(data_uri)
    response = FileResponse(io.BytesIO(content), as_attachment=True, filename=filename)
    response["Content-Type"] = mime_type
    return response
