"""
Unit tests for the compress PDF action.
"""

import base64
from unittest.mock import patch

import fitz
from django.test import TestCase, override_settings
from src.api.compress_pdf.actions import (
    ENCRYPTED_PDF_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    CompressPdfOutput,
    compress_pdf_action,
    error_message_for,
    error_type_for,
)
from src.api.pdf_utils import PDF_DATA_URI_PREFIX
from src.exceptions import (
    EncryptedPDFError,
    InvalidDataURIError,
    InvalidPDFError,
    MissingPDFError,
)

from .helpers import (
    TEST_SETTINGS,
    make_empty_pdf_bytes,
    make_owner_restricted_pdf_bytes,
    make_password_protected_pdf_bytes,
    make_pdf_bytes,
    page_count,
    to_data_uri,
)


@override_settings(**TEST_SETTINGS)
class CompressPDFActionTestCase(TestCase):
    """Test cases for compress_pdf_action."""

    def test_valid_pdf_keeps_page_count(self):
        pdf_bytes = make_pdf_bytes(pages=2)
        result = compress_pdf_action(to_data_uri(pdf_bytes), "recommended")

        self.assertIsNone(result.error)
        self.assertTrue(result.is_success)
        self.assertTrue(result.compressed_pdf_data_uri.startswith(PDF_DATA_URI_PREFIX))
        self.assertEqual(result.original_size, len(pdf_bytes))

        output = base64.b64decode(result.compressed_pdf_data_uri[len(PDF_DATA_URI_PREFIX):])
        self.assertEqual(result.compressed_size, len(output))
        self.assertTrue(output.startswith(b"%PDF"))
        self.assertEqual(page_count(output), 2)

    def test_level_does_not_change_output(self):
        data_uri = to_data_uri(make_pdf_bytes(pages=3))

        sizes = {
            level: compress_pdf_action(data_uri, level).compressed_size
            for level in ("extreme", "recommended", "less")
        }

        self.assertEqual(len(set(sizes.values())), 1, sizes)

    def test_wrong_prefix_is_rejected_without_decoding(self):
        with patch("src.api.compress_pdf.actions.decode_pdf_data_uri") as decode:
            result = compress_pdf_action("data:text/plain;base64,SGVsbG8=", "recommended")

        decode.assert_not_called()
        self.assertTrue(result.error.startswith("Invalid PDF data format"))
        self.assertEqual(result.error_type, "format")
        self.assertEqual(result.to_dict(), {"error": result.error})

    def test_prefix_must_match_exactly(self):
        for data_uri in (
            "data:application/x-pdf;base64,JVBERi0=",
            "DATA:application/pdf;base64,JVBERi0=",
            "data:application/pdf,JVBERi0=",
        ):
            with self.subTest(data_uri=data_uri):
                result = compress_pdf_action(data_uri, "less")
                self.assertEqual(result.error_type, "format")

    def test_empty_or_missing_payload(self):
        with patch("src.api.compress_pdf.actions.load_pdf_document") as load:
            for value in ("", None):
                with self.subTest(value=value):
                    result = compress_pdf_action(value, "recommended")
                    self.assertEqual(result.error, "No PDF file provided for compression.")
                    self.assertEqual(result.error_type, "missing")

        load.assert_not_called()

    def test_garbage_payload_is_a_parse_error(self):
        result = compress_pdf_action(
            PDF_DATA_URI_PREFIX + base64.b64encode(b"not a pdf at all").decode(),
            "recommended",
        )

        self.assertIsNotNone(result.error)
        self.assertFalse(result.is_success)
        self.assertIsNone(result.compressed_pdf_data_uri)

    def test_bad_base64_is_a_parse_error(self):
        result = compress_pdf_action(PDF_DATA_URI_PREFIX + "abc", "recommended")

        self.assertIsNotNone(result.error)
        self.assertEqual(result.error_type, "invalid")

    def test_empty_base64_payload_is_a_parse_error(self):
        result = compress_pdf_action(PDF_DATA_URI_PREFIX, "recommended")

        self.assertIsNotNone(result.error)
        self.assertEqual(result.error_type, "invalid")

    def test_password_protected_pdf(self):
        data_uri = to_data_uri(make_password_protected_pdf_bytes())

        result = compress_pdf_action(data_uri, "extreme")

        self.assertEqual(result.error, ENCRYPTED_PDF_MESSAGE)
        self.assertEqual(result.error_type, "encrypted")

    def test_pdf_without_pages_succeeds(self):
        pdf_bytes = make_empty_pdf_bytes()

        with self.assertLogs("src.api.compress_pdf.actions", level="WARNING") as logs:
            result = compress_pdf_action(to_data_uri(pdf_bytes), "recommended")

        self.assertTrue(result.is_success, result.error)
        self.assertEqual(result.original_size, len(pdf_bytes))
        output = base64.b64decode(result.compressed_pdf_data_uri[len(PDF_DATA_URI_PREFIX):])
        self.assertTrue(output.startswith(b"%PDF"))
        self.assertEqual(page_count(output), 0)
        self.assertIn("Original PDF had no pages.", "\n".join(logs.output))

    def test_owner_restricted_pdf_is_compressed(self):
        pdf_bytes = make_owner_restricted_pdf_bytes()

        result = compress_pdf_action(to_data_uri(pdf_bytes), "recommended")

        self.assertIsNone(result.error)
        self.assertTrue(result.is_success)
        self.assertEqual(result.original_size, len(pdf_bytes))
        output = base64.b64decode(result.compressed_pdf_data_uri[len(PDF_DATA_URI_PREFIX):])
        # Output stays encrypted; PyMuPDF opens it with the empty user password
        with fitz.open(stream=output, filetype="pdf") as doc:
            self.assertEqual(doc.page_count, 1)

    def test_unexpected_failure_surfaces_message(self):
        with patch(
            "src.api.compress_pdf.actions.save_with_object_streams",
            side_effect=RuntimeError("disk on fire"),
        ):
            result = compress_pdf_action(to_data_uri(make_pdf_bytes(1)), "less")

        self.assertEqual(result.error, "disk on fire")
        self.assertEqual(result.error_type, "unexpected")

    def test_unexpected_failure_without_message_uses_fallback(self):
        with patch(
            "src.api.compress_pdf.actions.save_with_object_streams",
            side_effect=RuntimeError(),
        ):
            result = compress_pdf_action(to_data_uri(make_pdf_bytes(1)), "less")

        self.assertEqual(result.error, UNEXPECTED_ERROR_MESSAGE)


class ErrorMessageTestCase(TestCase):
    """Test cases for the user-facing error message mapping."""

    def test_encryption_message_is_replaced(self):
        self.assertEqual(
            error_message_for(RuntimeError("Input document to PDFDocument.load is encrypted")),
            ENCRYPTED_PDF_MESSAGE,
        )

    def test_encryption_message_mentioning_flag_is_kept(self):
        message = "document is encrypted, pass ignore_encryption=True to load it"
        self.assertEqual(error_message_for(RuntimeError(message)), message)

    def test_error_types(self):
        self.assertEqual(error_type_for(MissingPDFError()), "missing")
        self.assertEqual(error_type_for(InvalidDataURIError()), "format")
        self.assertEqual(error_type_for(InvalidPDFError("broken xref")), "invalid")
        self.assertEqual(error_type_for(EncryptedPDFError()), "encrypted")
        self.assertEqual(error_type_for(RuntimeError("boom")), "unexpected")

    def test_other_messages_are_kept(self):
        self.assertEqual(error_message_for(ValueError("broken xref")), "broken xref")
        self.assertEqual(error_message_for(ValueError("")), UNEXPECTED_ERROR_MESSAGE)


class CompressPdfOutputTestCase(TestCase):
    def test_success_to_dict(self):
        output = CompressPdfOutput(
            compressed_pdf_data_uri=PDF_DATA_URI_PREFIX + "AAAA",
            original_size=10,
            compressed_size=8,
        )

        self.assertTrue(output.is_success)
        self.assertEqual(
            output.to_dict(),
            {
                "compressedPdfDataUri": PDF_DATA_URI_PREFIX + "AAAA",
                "originalSize": 10,
                "compressedSize": 8,
            },
        )

    def test_failure_to_dict(self):
        output = CompressPdfOutput.failure("nope", "invalid")

        self.assertFalse(output.is_success)
        self.assertEqual(output.to_dict(), {"error": "nope"})
