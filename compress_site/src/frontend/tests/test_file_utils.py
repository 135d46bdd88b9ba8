"""
Tests for the data URI file helpers.
"""

from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase
from src.frontend.file_utils import (
    FileReadError,
    build_download_response,
    read_file_as_data_uri,
    split_data_uri,
)


class FileUtilsTestCase(SimpleTestCase):
    def test_read_file_as_data_uri(self):
        upload = SimpleUploadedFile("a.pdf", b"%PDF-1.4", content_type="application/pdf")

        self.assertEqual(
            read_file_as_data_uri(upload), "data:application/pdf;base64,JVBERi0xLjQ="
        )

    def test_read_keeps_reported_media_type(self):
        upload = SimpleUploadedFile("a.pdf", b"abc", content_type="application/octet-stream")

        self.assertTrue(
            read_file_as_data_uri(upload).startswith("data:application/octet-stream;base64,")
        )

    def test_read_failure(self):
        upload = SimpleUploadedFile("a.pdf", b"abc", content_type="application/pdf")

        with patch.object(upload, "chunks", side_effect=OSError("I/O error")):
            with self.assertRaises(FileReadError):
                read_file_as_data_uri(upload)

    def test_split_data_uri(self):
        self.assertEqual(
            split_data_uri("data:application/pdf;base64,YWJj"), ("application/pdf", b"abc")
        )

        for bad in ("hello", "data:application/pdf,YWJj", "data:application/pdf;base64,a"):
            with self.subTest(data_uri=bad):
                with self.assertRaises(ValueError):
                    split_data_uri(bad)

    def test_build_download_response(self):
        response = build_download_response(
            "data:application/pdf;base64,JVBERi0xLjQ=", "compressed_a.pdf"
        )

        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertEqual(
            response["Content-Disposition"], 'attachment; filename="compressed_a.pdf"'
        )
        self.assertEqual(b"".join(response.streaming_content), b"%PDF-1.4")
