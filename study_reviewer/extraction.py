"""Route uploaded documents to the extractor for their file type."""
from __future__ import annotations

import functools
import logging
from collections.abc import Callable

from study_reviewer.extractors.pdf import extract_pdf
from study_reviewer.extractors.slides import (
    MAX_COMPRESSION_RATIO,
    MAX_UNCOMPRESSED_BYTES,
    extract_slides,
)
from study_reviewer.models import ExtractionResult

_log = logging.getLogger("study_reviewer.extract")

EXTRACTORS: dict[str, Callable[[bytes], ExtractionResult]] = {
    "pptx": extract_slides,
    "ppt": extract_slides,
    "pdf": extract_pdf,
}

SUPPORTED_EXTENSIONS = tuple(EXTRACTORS)

MIN_CONTENT_CHARS = 50


def get_file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def is_supported_file(filename: str) -> bool:
    return get_file_extension(filename) in EXTRACTORS


def extract_document(
    data: bytes,
    filename: str,
    *,
    max_uncompressed_bytes: int = MAX_UNCOMPRESSED_BYTES,
    max_compression_ratio: float = MAX_COMPRESSION_RATIO,
) -> ExtractionResult:
    """Extract plain text from *data*, choosing the strategy by *filename*'s extension.

    Never raises: unsupported types, unreadable archives and parser crashes
    all come back as a failed :class:`ExtractionResult`.  The size limits
    apply to archive-based formats.
    """
    ext = get_file_extension(filename)
    extractor = EXTRACTORS.get(ext)
    if extractor is None:
        return ExtractionResult.failure(
            f"Unsupported file type: .{ext}. Supported types: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    if extractor is extract_slides:
        extractor = functools.partial(
            extract_slides,
            max_uncompressed_bytes=max_uncompressed_bytes,
            max_ratio=max_compression_ratio,
        )

    _log.info("Extracting %s (%d bytes)", filename, len(data))
    try:
        return extractor(data)
    except Exception as e:
        _log.exception("Unexpected error parsing %s", filename)
        return ExtractionResult.failure(f"Failed to parse file: {e}")


def require_min_content(result: ExtractionResult, min_chars: int = MIN_CONTENT_CHARS) -> ExtractionResult:
    """Reject successful extractions whose trimmed text is shorter than *min_chars*."""
    if result.ok and len(result.text.strip()) < min_chars:
        return ExtractionResult.failure(
            "Not enough content found in the file. Please upload a file with more text."
        )
    return result
