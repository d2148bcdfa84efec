#!/usr/bin/env python3
"""
Plain-text extraction for uploaded article files (.txt, .pdf, .docx).
"""

from pathlib import Path

import fitz  # PyMuPDF
from docx import Document

from logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".txt": "text", ".pdf": "pdf", ".docx": "docx"}


class ExtractionError(ValueError):
    """The uploaded file could not be read as the type its extension claims."""


def source_type_for(filename: str) -> str:
    """Article source_type for an upload name; raises ExtractionError for other types."""
    suffix = Path(filename or "").suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        raise ExtractionError("Invalid file type. Allowed: .txt, .pdf, .docx")
    return ALLOWED_EXTENSIONS[suffix]


def extract_text(file_path: Path) -> str:
    """Extract the text of a stored upload."""
    suffix = file_path.suffix.lower()

    if suffix == ".pdf":
        try:
            doc = fitz.open(str(file_path))
        except (fitz.FileDataError, RuntimeError) as e:
            raise ExtractionError(f"Could not read PDF: {e}")
        with doc:
            text = "".join(page.get_text() for page in doc)
        return text.strip()

    if suffix == ".docx":
        try:
            doc = Document(str(file_path))
        except Exception as e:
            # python-docx surfaces corrupt archives as several unrelated error types
            raise ExtractionError(f"Could not read DOCX: {e}")
        paragraphs = [p.text for p in doc.paragraphs]
        return "\n\n".join(paragraphs).strip()

    return file_path.read_text(encoding="utf-8", errors="ignore")
