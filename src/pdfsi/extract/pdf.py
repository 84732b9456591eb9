"""PDF text extraction using PyMuPDF."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import fitz

from pdfsi.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"

_WHITESPACE_RE = re.compile(r"\s+")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n]")


@dataclass
class PDFContent:
    text: str
    pages: int
    word_count: int
    metadata: Dict[str, Any] = field(default_factory=dict)


def looks_like_pdf(content: bytes) -> bool:
    return content[:1024].lstrip().startswith(PDF_MAGIC)


def clean_text(text: str) -> str:
    """
    Normalize extracted text before pattern matching.

    Whitespace runs collapse to a single space, anything outside printable
    ASCII is dropped, and the result is trimmed.
    """
    text = _WHITESPACE_RE.sub(" ", text)
    text = _NON_PRINTABLE_RE.sub("", text)
    return text.strip()


def count_words(text: str) -> int:
    return len(text.split())


def extract_text(content: bytes, filename: Optional[str] = None) -> PDFContent:
    """
    Extract and clean the text of a PDF document.

    Args:
        content: Raw PDF bytes
        filename: Name used in error messages and logs

    Returns:
        PDFContent with cleaned text, page count and word count

    Raises:
        ExtractionError: If the document cannot be opened or read
    """
    if not content:
        raise ExtractionError("Failed to parse PDF: empty document", filename=filename)

    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except Exception as e:
        logger.error("PDF parsing failed for %s: %s", filename or "<upload>", e)
        raise ExtractionError(f"Failed to parse PDF: {e}", filename=filename) from e

    try:
        pages_text = [page.get_text() for page in doc]
        pages = doc.page_count
        metadata = {k: v for k, v in (doc.metadata or {}).items() if v}
    except Exception as e:
        logger.error("PDF text extraction failed for %s: %s", filename or "<upload>", e)
        raise ExtractionError(f"Failed to parse PDF: {e}", filename=filename) from e
    finally:
        doc.close()

    text = clean_text("\n".join(pages_text))
    logger.debug("Extracted %d chars from %d page(s)", len(text), pages)
    return PDFContent(
        text=text,
        pages=pages,
        word_count=count_words(text),
        metadata=metadata,
    )
