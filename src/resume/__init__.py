"""
Resume Service - PDF résumé parsing and proficiency analysis.
"""

from .pdf import (
    FileValidation,
    PDFExtractionResult,
    extract_text_from_pdf,
    preprocess_text,
    validate_pdf_file,
)
from .profile_extractor import ResumeParser
from .service import ParsedResume, parse_resume

__all__ = [
    "FileValidation",
    "PDFExtractionResult",
    "ParsedResume",
    "ResumeParser",
    "extract_text_from_pdf",
    "parse_resume",
    "preprocess_text",
    "validate_pdf_file",
]
