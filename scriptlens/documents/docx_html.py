"""Word document to HTML-like markup to plain text.

python-docx gives us the document tree; we render it to a small HTML subset
(paragraphs, headings, list items, bold/italic runs, tables) so the markup
size can be compared against the extracted text, then strip it back down with
a deterministic tag transform.
"""

import html
import re
from dataclasses import dataclass

from docx.document import Document as DocxDocument
from docx.table import Table
from docx.text.paragraph import Paragraph

KNOWN_PARAGRAPH_STYLES = frozenset(
    {
        "Normal",
        "Body Text",
        "No Spacing",
        "Title",
        "Subtitle",
        "List Paragraph",
        "List Bullet",
        "List Number",
    }
)

_HEADING_STYLE_RE = re.compile(r"^Heading ([1-6])$")

_TAG_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"</p>", re.IGNORECASE), "\n"),
    (re.compile(r"<p[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    (re.compile(r"</li>", re.IGNORECASE), "\n"),
    (re.compile(r"<li[^>]*>", re.IGNORECASE), "• "),
    (re.compile(r"</h[1-6]>", re.IGNORECASE), "\n"),
    (re.compile(r"<h[1-6][^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<[^>]*>"), ""),
)

# &amp; goes last so "&amp;lt;" decodes to "&lt;" and not "<".
_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)

_BLANK_LINES_RE = re.compile(r"\n\s*\n")
_HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")


@dataclass(frozen=True)
class ConversionMessage:
    type: str  # "warning" or "info"
    message: str


@dataclass(frozen=True)
class DocxConversion:
    html: str
    messages: list[ConversionMessage]
    image_count: int
    table_count: int

    @property
    def warning_count(self) -> int:
        return sum(1 for m in self.messages if m.type == "warning")


def html_to_plain_text(markup: str) -> str:
    text = markup
    for pattern, replacement in _TAG_RULES:
        text = pattern.sub(replacement, text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    return text.strip()


def convert_document(document: DocxDocument) -> DocxConversion:
    """Render the body of a python-docx document as HTML-like markup."""
    renderer = _Renderer()
    table_count = 0
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            table_count += 1
            renderer.table(block)
        else:
            renderer.paragraph(block)
    renderer.close_list()
    return DocxConversion(
        html="".join(renderer.parts),
        messages=renderer.messages,
        image_count=len(document.inline_shapes),
        table_count=table_count,
    )


class _Renderer:
    def __init__(self) -> None:
        self.parts: list[str] = []
        self.messages: list[ConversionMessage] = []
        self._in_list = False
        self._reported_styles: set[str] = set()

    def paragraph(self, paragraph: Paragraph) -> None:
        inner = self._runs(paragraph)
        if not inner:
            return
        style = paragraph.style.name if paragraph.style is not None else "Normal"

        if self._is_list_item(paragraph, style):
            if not self._in_list:
                self.parts.append("<ul>")
                self._in_list = True
            self.parts.append(f"<li>{inner}</li>")
            return
        self.close_list()

        heading = _HEADING_STYLE_RE.match(style)
        if heading:
            level = heading.group(1)
            self.parts.append(f"<h{level}>{inner}</h{level}>")
        elif style == "Title":
            self.parts.append(f"<h1>{inner}</h1>")
        elif style == "Subtitle":
            self.parts.append(f"<h2>{inner}</h2>")
        else:
            if style not in KNOWN_PARAGRAPH_STYLES:
                self._report_style(style)
            self.parts.append(f"<p>{inner}</p>")

    def table(self, table: Table) -> None:
        self.close_list()
        self.parts.append("<table>")
        for row in table.rows:
            self.parts.append("<tr>")
            for cell in row.cells:
                self.parts.append("<td>")
                for paragraph in cell.paragraphs:
                    self.paragraph(paragraph)
                self.close_list()
                self.parts.append("</td>")
            self.parts.append("</tr>")
        self.parts.append("</table>")

    def close_list(self) -> None:
        if self._in_list:
            self.parts.append("</ul>")
            self._in_list = False

    @staticmethod
    def _is_list_item(paragraph: Paragraph, style: str) -> bool:
        if style.startswith("List ") and style != "List Paragraph":
            return True
        p_pr = paragraph._p.pPr
        return p_pr is not None and p_pr.numPr is not None

    @staticmethod
    def _runs(paragraph: Paragraph) -> str:
        chunks: list[str] = []
        for run in paragraph.runs:
            if not run.text:
                continue
            text = html.escape(run.text, quote=False).replace("\n", "<br />")
            if run.italic:
                text = f"<em>{text}</em>"
            if run.bold:
                text = f"<strong>{text}</strong>"
            chunks.append(text)
        joined = "".join(chunks)
        return joined if joined.strip() else ""

    def _report_style(self, style: str) -> None:
        if style in self._reported_styles:
            return
        self._reported_styles.add(style)
        self.messages.append(
            ConversionMessage(
                type="warning",
                message=f"Unrecognised paragraph style: '{style}'",
            )
        )
