"""Document text extraction."""

from pdfsi.extract.pdf import PDFContent, clean_text, count_words, extract_text, looks_like_pdf

__all__ = ["PDFContent", "clean_text", "count_words", "extract_text", "looks_like_pdf"]
