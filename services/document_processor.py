"""
Document Processor Service

Turns a bidder's uploaded submission into plain text for the
document-evaluation agent. PDF pages go through PyPDF2, Word files through
python-docx (tables included, since price schedules usually live there).
"""

import io
import re
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from docx import Document

from config.logging_config import get_logger

logger = get_logger("services.documents")

# Fewer characters than this on most pages means a scanned submission
SCANNED_PAGE_THRESHOLD = 100


def clean_text(text: str) -> str:
    """Collapse runs of spaces and blank lines."""
    if not text:
        return ""
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _pdf_text(data: bytes) -> Tuple[str, List[str]]:
    warnings = []
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [clean_text(page.extract_text() or "") for page in reader.pages]
    except (PdfReadError, ValueError, KeyError) as e:
        return "", [f"Could not read PDF: {e}"]

    sparse = sum(1 for page in pages if len(page) < SCANNED_PAGE_THRESHOLD)
    if pages and sparse > len(pages) / 2:
        warnings.append(
            f"{sparse} of {len(pages)} pages have little text; the submission may be scanned"
        )
    return "\n\n".join(page for page in pages if page), warnings


def _docx_text(data: bytes) -> Tuple[str, List[str]]:
    try:
        doc = Document(io.BytesIO(data))
    except (ValueError, KeyError, OSError) as e:
        return "", [f"Could not read DOCX: {e}"]

    blocks = [para.text.strip() for para in doc.paragraphs if para.text.strip()]

    rows = []
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append(" | ".join(cells))
    if rows:
        blocks.append("[Table Content]\n" + "\n".join(rows))

    return "\n\n".join(blocks), []


def _plain_text(data: bytes) -> Tuple[str, List[str]]:
    return clean_text(data.decode("utf-8", errors="replace")), []


_EXTRACTORS: Dict[str, Tuple[str, Callable[[bytes], Tuple[str, List[str]]]]] = {
    ".pdf": ("pdf", _pdf_text),
    ".docx": ("docx", _docx_text),
    ".txt": ("text", _plain_text),
    ".md": ("text", _plain_text),
}


class DocumentProcessor:
    """Extracts bounded text from submission files."""

    def __init__(self, max_chars: int = 20000):
        self.max_chars = max_chars

    def process_bytes(self, file_bytes: bytes, filename: str) -> dict:
        """
        Extract text from a submission.

        Returns:
            Dict with ``source``, ``format``, ``text``, ``truncated`` and ``warnings``

        Raises:
            ValueError: If the file type is not supported
        """
        suffix = Path(filename).suffix.lower()
        if suffix not in _EXTRACTORS:
            raise ValueError(f"Unsupported file format: {suffix or filename}")

        fmt, extract = _EXTRACTORS[suffix]
        text, warnings = extract(file_bytes)
        for warning in warnings:
            logger.warning(f"{filename}: {warning}")

        truncated = len(text) > self.max_chars
        if truncated:
            text = text[:self.max_chars]
            warnings.append(f"Text truncated to {self.max_chars} characters")

        return {
            "source": filename,
            "format": fmt,
            "text": text,
            "truncated": truncated,
            "warnings": warnings,
        }


_processor = None


def get_processor() -> DocumentProcessor:
    """Shared processor instance."""
    global _processor
    if _processor is None:
        _processor = DocumentProcessor()
    return _processor
