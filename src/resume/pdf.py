"""
PDF résumé handling: upload validation and text extraction.
"""

import io
import re
from dataclasses import dataclass
from typing import Optional

import pdfplumber
from loguru import logger

PDF_MAGIC = b"%PDF"
MAX_FILE_SIZE = 10 * 1024 * 1024
MIN_FILE_SIZE = 1024

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class FileValidation:
    valid: bool
    error: Optional[str] = None


@dataclass
class PDFExtractionResult:
    text: str
    pages: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text.strip())


def validate_pdf_file(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    max_size: int = MAX_FILE_SIZE,
    min_size: int = MIN_FILE_SIZE,
) -> FileValidation:
    """
    Check an uploaded file before parsing it.

    The file counts as a PDF when either its MIME type mentions pdf or its
    name ends in ``.pdf``.
    """
    mime_type = (content_type or "").lower()
    name = (filename or "").lower()

    if "pdf" not in mime_type and not name.endswith(".pdf"):
        return FileValidation(valid=False, error="File must be a PDF")

    if size > max_size:
        return FileValidation(
            valid=False,
            error=f"File size must be less than {max_size // (1024 * 1024)}MB",
        )

    # Anything under the minimum is almost certainly empty or truncated
    if size < min_size:
        return FileValidation(valid=False, error="File is too small to be a valid resume")

    return FileValidation(valid=True)


def extract_text_from_pdf(data: bytes) -> PDFExtractionResult:
    """
    Extract text from every page of a PDF.

    Never raises; problems are reported through ``PDFExtractionResult.error``.
    """
    if not data.startswith(PDF_MAGIC):
        return PDFExtractionResult(text="", pages=0, error="Invalid PDF file")

    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error(f"PDF extraction error: {e}")
        return PDFExtractionResult(text="", pages=0, error=f"Failed to parse PDF: {e}")

    text = "\n\n".join(pages).strip()
    logger.info(f"Extracted {len(text)} chars from {len(pages)} PDF pages")
    return PDFExtractionResult(text=text, pages=len(pages))


def preprocess_text(text: str) -> str:
    """Normalize extracted text for the LLM: one space between words."""
    cleaned = text.replace("\f", "\n").replace("\r", "")
    return _WHITESPACE_RE.sub(" ", cleaned).strip()
