"""Document reader - decodes uploaded files to plain text.

Supported inputs:
- Plain text and markdown (.txt, .md, text/plain, text/markdown)
- Word documents (.docx) via python-docx
- PDF documents (.pdf, application/pdf) via pdfplumber

Legacy .doc files are not supported; convert them to .docx or plain text.
"""

from io import BytesIO
from pathlib import PurePath
from typing import Optional

import docx
import pdfplumber

from app.core.config import settings
from app.core.exceptions import DocumentReadError, UnsupportedDocumentError, ValidationError
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

TEXT_EXTENSIONS = {".txt", ".md"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}
DOCX_EXTENSION = ".docx"
PDF_EXTENSION = ".pdf"
PDF_CONTENT_TYPE = "application/pdf"

SUPPORTED_EXTENSIONS = sorted(TEXT_EXTENSIONS | {DOCX_EXTENSION, PDF_EXTENSION})


def read_document(filename: Optional[str], content_type: Optional[str], content: bytes) -> str:
    """Decode an uploaded document to text.

    The file extension decides the decoder; the content type is consulted
    when the extension is missing or unknown.

    Args:
        filename: Original file name
        content_type: MIME type reported by the client
        content: Raw file bytes

    Returns:
        Extracted document text (may be blank)

    Raises:
        UnsupportedDocumentError: If the file type is not supported
        DocumentReadError: If the file cannot be decoded
    """
    extension = PurePath(filename or "").suffix.lower()
    media_type = (content_type or "").split(";")[0].strip().lower()

    LOGGER.info(
        "Reading uploaded document",
        extra={"document_name": filename, "content_type": media_type, "size_bytes": len(content)},
    )

    if extension == DOCX_EXTENSION:
        return _read_docx(content)
    if extension == PDF_EXTENSION:
        return _read_pdf(content)
    if extension in TEXT_EXTENSIONS:
        return _read_text(content)

    # Unknown or missing extension: the reported content type decides
    if media_type == PDF_CONTENT_TYPE:
        return _read_pdf(content)
    if media_type in TEXT_CONTENT_TYPES:
        return _read_text(content)

    raise UnsupportedDocumentError(
        f"Unsupported file type '{extension or media_type or 'unknown'}'. "
        f"Please upload one of: {', '.join(SUPPORTED_EXTENSIONS)}."
    )


def ensure_document_text(text: str) -> str:
    """Reject empty or whitespace-only document text.

    Raises:
        ValidationError: If the text has no non-whitespace characters
    """
    if not text or not text.strip():
        raise ValidationError("Document contains no text to analyze.")
    return text


def _read_text(content: bytes) -> str:
    # utf-8-sig drops a leading BOM; undecodable bytes become U+FFFD
    return content.decode("utf-8-sig", errors="replace")


def _read_docx(content: bytes) -> str:
    try:
        document = docx.Document(BytesIO(content))
    except Exception as e:
        LOGGER.warning(f"Failed to open .docx document: {e}")
        raise DocumentReadError(f"Could not read .docx file: {e}", original_error=e) from e

    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _read_pdf(content: bytes) -> str:
    try:
        with pdfplumber.open(BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        LOGGER.warning(f"Failed to extract text from PDF: {e}")
        raise DocumentReadError(f"Could not read PDF file: {e}", original_error=e) from e

    LOGGER.debug(f"Extracted text from {len(pages)} PDF page(s)")
    return "\n".join(pages)
