from pathlib import Path

import docx
import pytest

from scriptlens.documents.docx_html import convert_document, html_to_plain_text
from scriptlens.documents.exceptions import UnsupportedFormatError
from scriptlens.documents.models import ValidationErrorCode
from scriptlens.documents.word_processor import WordProcessor


class TestHtmlToPlainText:
    def test_paragraphs_and_breaks(self) -> None:
        assert html_to_plain_text("<p>One</p><p>Two<br />Three</p>") == "One\nTwo\nThree"

    def test_list_items_become_bullets(self) -> None:
        text = html_to_plain_text("<ul><li>Gun</li><li>Badge</li></ul>")
        assert text == "• Gun\n• Badge"

    def test_headings_and_inline_tags(self) -> None:
        text = html_to_plain_text("<h1>TITLE</h1><p><strong>SARAH</strong> runs</p>")
        assert text == "TITLE\nSARAH runs"

    def test_entities_decoded_with_ampersand_last(self) -> None:
        text = html_to_plain_text("<p>a &lt; b &amp;&amp; c&nbsp;&quot;d&quot; &#39;e&#39; &amp;lt;</p>")
        assert text == "a < b && c \"d\" 'e' &lt;"

    def test_collapses_whitespace(self) -> None:
        assert html_to_plain_text("<p>a \t  b</p>\n\n\n\n<p>c</p>") == "a b\n\nc"


class TestConvertDocument:
    def test_renders_structure(self, sample_docx_path: Path) -> None:
        conversion = convert_document(docx.Document(str(sample_docx_path)))
        assert "<h1>THE LAST CASE</h1>" in conversion.html
        assert "<strong>SARAH</strong>" in conversion.html
        assert "<li>Evidence board</li>" in conversion.html
        assert "&amp;" in conversion.html
        assert conversion.table_count == 1
        assert conversion.image_count == 0
        assert conversion.warning_count == 0

    def test_unknown_style_reported_once(self) -> None:
        document = docx.Document()
        document.add_paragraph("first", style="Quote")
        document.add_paragraph("second", style="Quote")
        conversion = convert_document(document)
        assert conversion.warning_count == 1
        assert "Quote" in conversion.messages[0].message


class TestWordProcessor:
    def test_validate_real_docx(self, sample_docx_path: Path) -> None:
        result = WordProcessor().validate(sample_docx_path)
        assert result.is_valid

    def test_wrong_signature(self, tmp_path: Path) -> None:
        path = tmp_path / "script.docx"
        path.write_bytes(b"%PDF-1.4 pretending")
        result = WordProcessor().validate(path)
        assert [e.code for e in result.errors] == [ValidationErrorCode.UNSUPPORTED_FORMAT]
        with pytest.raises(UnsupportedFormatError):
            WordProcessor().parse(path)

    def test_zip_that_is_not_a_document(self, tmp_path: Path) -> None:
        path = tmp_path / "script.docx"
        path.write_bytes(b"PK\x03\x04" + b"\x00" * 64)
        result = WordProcessor().validate(path)
        assert [e.code for e in result.errors] == [ValidationErrorCode.CORRUPTED_FILE]

    def test_parse(self, sample_docx_path: Path) -> None:
        document = WordProcessor().parse(sample_docx_path)
        assert document.title == "The Last Case"
        assert "SARAH walks in out of the rain & shakes off her coat." in document.content
        assert "• Evidence board" in document.content
        assert "<" not in document.content
        assert document.metadata.author == "Jane Writer"
        assert document.metadata.page_count is None
        extra = document.metadata.additional_metadata
        assert extra["table_count"] == 1
        assert extra["has_images"] is False
        assert extra["extracted_html"].startswith("<h1>")
        assert 0.1 <= document.confidence <= 1.0

    def test_title_from_first_line_without_core_title(self, tmp_path: Path) -> None:
        document = docx.Document()
        document.core_properties.title = ""
        document.add_paragraph("NIGHT SHIFT")
        document.add_paragraph("A nurse works alone on the ward. The lights flicker.")
        path = tmp_path / "untitled.docx"
        document.save(str(path))
        assert WordProcessor().parse(path).title == "NIGHT SHIFT"
