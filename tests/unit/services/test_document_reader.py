"""Tests for uploaded document decoding."""

from io import BytesIO
from unittest.mock import MagicMock, Mock, patch

import docx
import pytest

from app.core.exceptions import DocumentReadError, UnsupportedDocumentError, ValidationError
from app.services.document_reader import ensure_document_text, read_document


def _docx_bytes(*paragraphs: str) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestPlainText:
    """Plain text and markdown uploads."""

    def test_txt(self):
        assert read_document("notes.txt", "text/plain", b"Alice met Bob.") == "Alice met Bob."

    def test_markdown_keeps_markup(self):
        content = "# Chapter 1\n\n*Alice* met Bob.".encode("utf-8")

        assert read_document("story.MD", None, content) == "# Chapter 1\n\n*Alice* met Bob."

    def test_utf8_bom_is_dropped(self):
        content = "\ufeffCafé".encode("utf-8")

        assert read_document("menu.txt", "text/plain", content) == "Café"

    def test_invalid_bytes_are_replaced(self):
        assert read_document("bad.txt", "text/plain", b"ok \xff") == "ok \ufffd"

    def test_content_type_without_extension(self):
        assert read_document("README", "text/markdown; charset=utf-8", b"# Title") == "# Title"

    def test_content_type_with_unknown_extension(self):
        assert read_document("server.log", "text/plain", b"Alice met Bob.") == "Alice met Bob."


class TestDocx:
    """Word document uploads."""

    def test_paragraphs_joined_by_newline(self):
        content = _docx_bytes("Alice met Bob.", "They discussed trade routes.")

        text = read_document(
            "story.docx",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            content,
        )

        assert text == "Alice met Bob.\nThey discussed trade routes."

    def test_corrupt_docx_raises(self):
        with pytest.raises(DocumentReadError):
            read_document("broken.docx", None, b"this is not a zip archive")


class TestPdf:
    """PDF uploads."""

    @staticmethod
    def _mock_pdf(*page_texts):
        pdf = MagicMock()
        pdf.pages = [Mock(**{"extract_text.return_value": text}) for text in page_texts]
        pdf.__enter__.return_value = pdf
        return pdf

    def test_pages_joined_by_newline(self):
        pdf = self._mock_pdf("Page one.", None, "Page three.")

        with patch("app.services.document_reader.pdfplumber.open", return_value=pdf) as mock_open:
            text = read_document("report.pdf", "application/pdf", b"%PDF-1.7")

        assert text == "Page one.\n\nPage three."
        mock_open.assert_called_once()

    def test_pdf_by_content_type(self):
        pdf = self._mock_pdf("Only page.")

        with patch("app.services.document_reader.pdfplumber.open", return_value=pdf):
            assert read_document("download", "application/pdf", b"%PDF-1.7") == "Only page."

    def test_pdf_content_type_with_unknown_extension(self):
        pdf = self._mock_pdf("Quarterly figures.")

        with patch("app.services.document_reader.pdfplumber.open", return_value=pdf):
            assert read_document("report.bin", "application/pdf", b"%PDF-1.7") == "Quarterly figures."

    def test_unreadable_pdf_raises(self):
        with patch(
            "app.services.document_reader.pdfplumber.open",
            side_effect=ValueError("no /Root object"),
        ):
            with pytest.raises(DocumentReadError, match="PDF"):
                read_document("broken.pdf", "application/pdf", b"garbage")


class TestUnsupported:
    """Rejected file types."""

    @pytest.mark.parametrize(
        "filename,content_type",
        [
            ("legacy.doc", "application/msword"),
            ("photo.png", "image/png"),
            (None, None),
        ],
    )
    def test_unsupported_types(self, filename, content_type):
        with pytest.raises(UnsupportedDocumentError):
            read_document(filename, content_type, b"\x00\x01")

    def test_unsupported_is_a_read_error(self):
        assert issubclass(UnsupportedDocumentError, DocumentReadError)


def test_ensure_document_text():
    assert ensure_document_text("  text  ") == "  text  "

    for blank in ("", "   ", "\n\t"):
        with pytest.raises(ValidationError):
            ensure_document_text(blank)
