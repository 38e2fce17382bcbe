import io
from pathlib import Path

import docx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

SCREENPLAY_LINES = [
    "THE LAST CASE",
    "",
    "INT. PRECINCT - NIGHT",
    "",
    "SARAH: I told you I was done with this place.",
    "MARCUS (V.O.): Then why did you come back?",
    "SARAH: Because the girl in the photo looks like her.",
]


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a single-page screenplay PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("The Last Case")
    c.setAuthor("Jane Writer")
    y = 720
    for line in SCREENPLAY_LINES:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_path(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "last_case.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


@pytest.fixture()
def sample_docx_path(tmp_path: Path) -> Path:
    """A small screenplay in Word format with a heading, bold run, list and table."""
    document = docx.Document()
    document.core_properties.title = "The Last Case"
    document.core_properties.author = "Jane Writer"
    document.add_heading("THE LAST CASE", level=1)
    paragraph = document.add_paragraph("INT. PRECINCT - NIGHT. ")
    paragraph.add_run("SARAH").bold = True
    paragraph.add_run(" walks in out of the rain & shakes off her coat.")
    document.add_paragraph("Evidence board", style="List Bullet")
    document.add_paragraph("Cold coffee", style="List Bullet")
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Scene"
    table.cell(0, 1).text = "Location"
    path = tmp_path / "last_case.docx"
    document.save(str(path))
    return path


@pytest.fixture()
def sample_text_path(tmp_path: Path) -> Path:
    path = tmp_path / "last_case.txt"
    path.write_text("\n".join(SCREENPLAY_LINES), encoding="utf-8")
    return path
