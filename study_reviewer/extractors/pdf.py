"""Extract text from PDF documents with pypdf."""
from __future__ import annotations

import io
import logging
import re

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from study_reviewer.models import ExtractionMetadata, ExtractionResult

_log = logging.getLogger("study_reviewer.extract")


def extract_pdf(data: bytes) -> ExtractionResult:
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            _log.warning("Encrypted PDF rejected")
            return ExtractionResult.failure("Encrypted PDF files are not supported")
        pages = [page.extract_text() or "" for page in reader.pages]
        title = _document_title(reader)
    except PyPdfError as e:
        _log.warning("PDF could not be read: %s", e)
        return ExtractionResult.failure(f"Failed to parse PDF: {e}")

    text = clean_pdf_text("\n".join(pages))
    if not text:
        _log.warning("PDF has no text layer (%d pages)", len(pages))
        return ExtractionResult.failure("No text content found in the PDF file")

    _log.info("Extracted %d pages, %d chars", len(pages), len(text))
    return ExtractionResult.success(
        text,
        ExtractionMetadata(page_count=len(pages), title=title),
    )


def _document_title(reader: PdfReader) -> str | None:
    info = reader.metadata
    if info is None or not info.title:
        return None
    return str(info.title).strip() or None


def clean_pdf_text(text: str) -> str:
    """Normalize whitespace in extracted PDF text.

    Runs of spaces/tabs become one space, every line is trimmed, three or
    more newlines become a paragraph break, and blank edges are dropped.
    """
    text = re.sub(r"[ \t]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
