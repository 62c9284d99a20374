"""Extract text from PowerPoint (.pptx) decks.

A .pptx file is a zip archive; each slide lives at ``ppt/slides/slideN.xml``
and its visible text sits in DrawingML ``<a:t>`` runs.  Some producers emit
text in other ``<t>`` elements (no namespace, or a different one), so those
are read as a fallback, skipping any text the primary runs already captured.
"""
from __future__ import annotations

import io
import logging
import re
import zipfile
import xml.etree.ElementTree as ET

from study_reviewer.models import ExtractionMetadata, ExtractionResult

_log = logging.getLogger("study_reviewer.extract")

SLIDE_PATH_RE = re.compile(r"ppt/slides/slide(\d+)\.xml$")

DRAWINGML_TEXT_TAG = "{http://schemas.openxmlformats.org/drawingml/2006/main}t"

# A fragment starting with a digit, bullet, dash or asterisk opens a new line
BULLET_RE = re.compile(r"^[\d•\-\*]")
LONG_FRAGMENT = 50

# Zip bomb guard, checked against the central directory before anything is inflated
MAX_UNCOMPRESSED_BYTES = 100 * 1024 * 1024
MAX_COMPRESSION_RATIO = 200.0


def archive_too_large(
    infos: list[zipfile.ZipInfo],
    max_uncompressed_bytes: int = MAX_UNCOMPRESSED_BYTES,
    max_ratio: float = MAX_COMPRESSION_RATIO,
) -> str | None:
    """Return a reason if the archive would inflate past the limits, else None."""
    total_comp = 0
    total_uncomp = 0
    for info in infos:
        total_comp += max(1, info.compress_size)
        total_uncomp += info.file_size
    if total_uncomp > max_uncompressed_bytes:
        return f"uncompressed size {total_uncomp} bytes exceeds {max_uncompressed_bytes}"
    ratio = total_uncomp / (total_comp or 1)
    if ratio > max_ratio:
        return f"compression ratio {ratio:.0f} exceeds {max_ratio:.0f}"
    return None


def extract_slides(
    data: bytes,
    max_uncompressed_bytes: int = MAX_UNCOMPRESSED_BYTES,
    max_ratio: float = MAX_COMPRESSION_RATIO,
) -> ExtractionResult:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            reason = archive_too_large(archive.infolist(), max_uncompressed_bytes, max_ratio)
            if reason:
                _log.warning("Rejected PowerPoint archive: %s", reason)
                return ExtractionResult.failure(
                    "Failed to parse PowerPoint: the file expands to more data than allowed"
                )
            slides = _find_slides(archive.namelist())
            contents: list[str] = []
            for number, path in slides:
                slide_text = slide_xml_to_text(archive.read(path))
                if slide_text.strip():
                    contents.append(f"[Slide {number}]\n{slide_text}")
    except zipfile.BadZipFile as e:
        _log.warning("Not a valid PowerPoint archive: %s", e)
        return ExtractionResult.failure(f"Failed to parse PowerPoint: {e}")
    except ET.ParseError as e:
        _log.warning("Slide XML could not be parsed: %s", e)
        return ExtractionResult.failure(f"Failed to parse PowerPoint: invalid slide XML ({e})")

    full_text = "\n\n".join(contents)
    if not full_text.strip():
        return ExtractionResult.failure("No text content found in the PowerPoint file")

    _log.info("Extracted %d slides (%d with text), %d chars", len(slides), len(contents), len(full_text))
    return ExtractionResult.success(full_text, ExtractionMetadata(slide_count=len(slides)))


def _find_slides(names: list[str]) -> list[tuple[int, str]]:
    """Return ``(slide_number, path)`` pairs in numeric slide order."""
    slides = []
    for name in names:
        m = SLIDE_PATH_RE.search(name)
        if m:
            slides.append((int(m.group(1)), name))
    slides.sort(key=lambda s: s[0])
    return slides


def slide_xml_to_text(xml: bytes | str) -> str:
    root = ET.fromstring(xml)

    parts: list[str] = []
    for elem in root.iter(DRAWINGML_TEXT_TAG):
        text = (elem.text or "").strip()
        if text:
            parts.append(text)

    for elem in root.iter():
        if elem.tag == DRAWINGML_TEXT_TAG or not isinstance(elem.tag, str):
            continue
        if elem.tag.rsplit("}", 1)[-1] != "t":
            continue
        text = (elem.text or "").strip()
        if text and text not in parts:
            parts.append(text)

    return reflow_fragments(parts)


def reflow_fragments(parts: list[str]) -> str:
    """Join text runs into lines.

    Bullets, numbered items and long runs start a new line; short runs are
    appended to the current line with a space.
    """
    lines: list[str] = []
    current = ""
    for part in parts:
        if BULLET_RE.match(part) or len(part) > LONG_FRAGMENT:
            if current:
                lines.append(current)
            current = part
        else:
            current = f"{current} {part}" if current else part
    if current:
        lines.append(current)
    return "\n".join(lines)
