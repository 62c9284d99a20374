"""Shared test fixtures."""
from __future__ import annotations

import io
import zipfile

import pytest

from study_reviewer.db import Database
from study_reviewer.models import GeneratedQuestion

DRAWINGML_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
PRESENTATIONML_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"


def slide_xml(*runs: str) -> str:
    """A minimal slide document with one <a:t> run per argument."""
    body = "".join(f"<a:r><a:t>{r}</a:t></a:r>" for r in runs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:sld xmlns:a="{DRAWINGML_NS}" xmlns:p="{PRESENTATIONML_NS}">'
        f"<p:cSld><p:spTree><p:sp><p:txBody><a:p>{body}</a:p></p:txBody></p:sp></p:spTree></p:cSld>"
        "</p:sld>"
    )


def build_pptx(
    slides: dict[int, str],
    extra: dict[str, str] | None = None,
    compression: int = zipfile.ZIP_STORED,
) -> bytes:
    """Zip up ``{slide_number: slide_xml}`` the way PowerPoint lays them out."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr("ppt/presentation.xml", "<presentation/>")
        for number, xml in slides.items():
            zf.writestr(f"ppt/slides/slide{number}.xml", xml)
            zf.writestr(f"ppt/slides/_rels/slide{number}.xml.rels", "<Relationships/>")
        for name, data in (extra or {}).items():
            zf.writestr(name, data)
    return buf.getvalue()


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[list[str]], title: str | None = None) -> bytes:
    """Write a small uncompressed PDF with one text line per list entry."""
    objects: list[bytes] = []

    def add(body: str) -> int:
        objects.append(body.encode("latin-1"))
        return len(objects)

    catalog_id = add("<< /Type /Catalog /Pages 2 0 R >>")
    pages_index = add("")  # placeholder, filled below
    font_id = add("<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    page_ids = []
    for lines in pages:
        ops = ["BT", "/F1 12 Tf", "72 720 Td", "16 TL"]
        for line in lines:
            ops.append(f"({_pdf_escape(line)}) Tj T*")
        ops.append("ET")
        stream = "\n".join(ops)
        content_id = add(f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream")
        page_ids.append(add(
            f"<< /Type /Page /Parent {pages_index} 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> /Contents {content_id} 0 R >>"
        ))

    kids = " ".join(f"{p} 0 R" for p in page_ids)
    objects[pages_index - 1] = f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>".encode("latin-1")

    info_id = None
    if title:
        info_id = add(f"<< /Title ({_pdf_escape(title)}) >>")

    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for i, body in enumerate(objects, 1):
        offsets.append(out.tell())
        out.write(f"{i} 0 obj\n".encode() + body + b"\nendobj\n")
    xref_at = out.tell()
    out.write(f"xref\n0 {len(objects) + 1}\n".encode())
    out.write(b"0000000000 65535 f \n")
    for off in offsets:
        out.write(f"{off:010d} 00000 n \n".encode())
    trailer = f"<< /Size {len(objects) + 1} /Root {catalog_id} 0 R"
    if info_id:
        trailer += f" /Info {info_id} 0 R"
    trailer += " >>"
    out.write(f"trailer\n{trailer}\nstartxref\n{xref_at}\n%%EOF\n".encode())
    return out.getvalue()


@pytest.fixture
def tmp_db(tmp_path):
    """Create a fresh temporary database."""
    db = Database(tmp_path / "test.db")
    yield db
    db.close()


@pytest.fixture
def sample_questions():
    """One question of each concrete type."""
    return [
        GeneratedQuestion(
            type="multiple_choice",
            question_text="Which organelle contains the cell's genetic material?",
            options=["Nucleus", "Ribosome", "Golgi apparatus", "Lysosome"],
            correct_answer="Nucleus",
            explanation="The study material states: 'The nucleus houses the DNA.'",
        ),
        GeneratedQuestion(
            type="identification",
            question_text="_____ is the phase in which chromosomes line up at the cell's equator.",
            correct_answer="Metaphase",
        ),
        GeneratedQuestion(
            type="true_false",
            question_text="Cell theory states that all cells come from pre-existing cells.",
            options=["True", "False"],
            correct_answer="True",
        ),
    ]


@pytest.fixture
def populated_db(tmp_db, sample_questions):
    """A database holding one quiz built from the sample questions."""
    quiz = tmp_db.create_quiz(
        title="Cell Biology",
        source_filename="cell-biology.pptx",
        source_content="Cell theory and mitosis.",
        question_type="mixed",
        total_questions=len(sample_questions),
    )
    tmp_db.create_questions(quiz["id"], sample_questions)
    return tmp_db


@pytest.fixture
def study_text():
    return (
        "[Slide 1]\nCell Theory\nAll living things are made of cells.\n\n"
        "[Slide 2]\nMitosis Phases\nProphase, metaphase, anaphase and telophase."
    )
