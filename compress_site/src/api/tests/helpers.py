"""
PDF fixtures shared by the API and frontend tests.
"""

import base64
from io import BytesIO

TEST_SETTINGS = {
    "CACHES": {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        }
    },
    "SESSION_ENGINE": "django.contrib.sessions.backends.cache",
    "LOGGING": {
        "version": 1,
        "disable_existing_loggers": True,
        "handlers": {"null": {"class": "logging.NullHandler"}},
        "root": {"handlers": ["null"]},
    },
}


def make_pdf_bytes(pages: int = 2) -> bytes:
    """Build a text PDF with ``pages`` pages using reportlab."""
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for number in range(1, pages + 1):
        c.drawString(72, 720, f"Page {number}")
        for line in range(30):
            c.drawString(72, 700 - line * 20, f"Line {line} of page {number}")
        c.showPage()
    c.save()
    return buf.getvalue()


def make_password_protected_pdf_bytes(password: str = "secret") -> bytes:
    """Build a one-page PDF that needs ``password`` to open."""
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Protected")
    data = doc.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner-" + password,
        user_pw=password,
    )
    doc.close()
    return data


def make_owner_restricted_pdf_bytes() -> bytes:
    """Build a PDF that opens without a password but carries owner restrictions."""
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Restricted")
    data = doc.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="",
        permissions=fitz.PDF_PERM_ACCESSIBILITY,
    )
    doc.close()
    return data


def make_empty_pdf_bytes() -> bytes:
    """Build a valid PDF whose page tree is empty."""
    from PyPDF2 import PdfWriter

    buf = BytesIO()
    PdfWriter().write(buf)
    return buf.getvalue()


def to_data_uri(pdf_bytes: bytes, mime_type: str = "application/pdf") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(pdf_bytes).decode('ascii')}"


def page_count(pdf_bytes: bytes) -> int:
    from PyPDF2 import PdfReader

    return len(PdfReader(BytesIO(pdf_bytes)).pages)
