"""Resume upload handling: format detection, PDF sanity checks, DOCX text.

PDFs are sent to Gemini as inline documents; DOCX files are not accepted
inline, so their text is extracted locally first.
"""

import io
import logging

import pdfplumber
from docx import Document

from services.errors import InvalidUploadError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_EXTENSIONS = {".pdf": PDF_MIME, ".docx": DOCX_MIME}


def detect_mime_type(filename: str | None, content_type: str | None = None) -> str:
    """Resolve the upload to PDF or DOCX, by extension first, then content type."""
    name = (filename or "").lower()
    for ext, mime in _EXTENSIONS.items():
        if name.endswith(ext):
            return mime
    if content_type in _EXTENSIONS.values():
        return content_type
    raise InvalidUploadError("Only PDF and DOCX resumes are accepted")


def count_pdf_pages(pdf_bytes: bytes) -> int:
    """Open the PDF to make sure it is readable; return its page count."""
    try:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            pages = len(pdf.pages)
    except Exception as e:
        logger.warning("Unreadable PDF upload: %s", e)
        raise InvalidUploadError("Could not parse PDF file") from e
    if pages == 0:
        raise InvalidUploadError("PDF has no pages")
    return pages


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all paragraph text from a DOCX file."""
    try:
        doc = Document(io.BytesIO(docx_bytes))
    except Exception as e:
        logger.warning("Unreadable DOCX upload: %s", e)
        raise InvalidUploadError("Could not parse DOCX file") from e
    text = "\n".join(p.text for p in doc.paragraphs).strip()
    if not text:
        raise InvalidUploadError("No text could be extracted from DOCX")
    return text
