import io
from pathlib import Path

import docx

from scriptlens.documents.base import (
    MB,
    BaseDocumentProcessor,
    ValidationState,
    clamp_confidence,
    extract_title,
)
from scriptlens.documents.docx_html import DocxConversion, convert_document, html_to_plain_text
from scriptlens.documents.models import (
    DocumentFormat,
    ParsedDocument,
    ValidationErrorCode,
    ValidationResult,
)

ZIP_SIGNATURE = b"PK"


def calculate_word_confidence(conversion: DocxConversion, plain_text: str, file_size: int) -> float:
    confidence = 1.0
    stripped_length = len(plain_text.strip())
    if stripped_length == 0:
        confidence = 0.1
    elif stripped_length < 100:
        confidence = 0.3

    if conversion.warning_count > 0:
        confidence *= max(0.5, 1 - 0.1 * conversion.warning_count)

    if file_size > 0 and len(plain_text) / file_size < 0.001:
        confidence *= 0.5

    # markup dwarfing the text means the conversion was probably lossy
    if len(conversion.html) > len(plain_text) * 5:
        confidence *= 0.8

    return clamp_confidence(confidence)


class WordProcessor(BaseDocumentProcessor):
    """Validates and decodes Word (docx) screenplays."""

    format = DocumentFormat.WORD
    label = "DOCX"
    max_file_size = 25 * MB

    def _validate_format(self, path: Path, state: ValidationState) -> None:
        if not self._read_head(path, 4).startswith(ZIP_SIGNATURE):
            state.fail(
                ValidationErrorCode.UNSUPPORTED_FORMAT,
                "File does not appear to be a valid DOCX document",
                details="DOCX magic number not found in file header",
                suggestions=[
                    "Ensure the file is a valid DOCX document",
                    "Try opening the file in Microsoft Word to verify it works",
                    "Re-save the document as DOCX if possible",
                ],
            )
            return

        try:
            docx.Document(str(path))
        except Exception as exc:
            lowered = str(exc).lower()
            if "password" in lowered or "encrypt" in lowered:
                state.fail(
                    ValidationErrorCode.CORRUPTED_FILE,
                    "DOCX is password protected or encrypted",
                    details=str(exc),
                    suggestions=[
                        "Remove password protection from the DOCX",
                        "Use an unencrypted version of the DOCX",
                    ],
                )
            else:
                state.fail(
                    ValidationErrorCode.CORRUPTED_FILE,
                    "DOCX appears to be corrupted or invalid",
                    details=f"{type(exc).__name__}: {exc}",
                    suggestions=[
                        "Try opening the file in Microsoft Word to verify it works",
                        "Re-save the document if possible",
                        "Use a different DOCX file",
                    ],
                )

    def _decode(self, path: Path, data: bytes, validation: ValidationResult) -> ParsedDocument:
        document = docx.Document(io.BytesIO(data))
        conversion = convert_document(document)
        plain_text = html_to_plain_text(conversion.html)
        properties = document.core_properties

        file_size = validation.file_size_bytes
        title = extract_title(plain_text, path.stem, embedded=properties.title)
        additional = {
            "extracted_html": conversion.html,
            "conversion_messages": [
                {"type": m.type, "message": m.message} for m in conversion.messages
            ],
            "image_count": conversion.image_count,
            "table_count": conversion.table_count,
            "has_images": conversion.image_count > 0,
            "has_unsupported_elements": conversion.warning_count > 0,
        }
        metadata = self._build_metadata(
            plain_text,
            file_size,
            author=properties.author or None,
            additional=additional,
        )
        return ParsedDocument(
            content=plain_text,
            title=title,
            metadata=metadata,
            warnings=self._collect_warnings(self._docx_warnings(conversion, plain_text), plain_text),
            confidence=calculate_word_confidence(conversion, plain_text, file_size),
        )

    @staticmethod
    def _docx_warnings(conversion: DocxConversion, plain_text: str) -> list[str]:
        warnings: list[str] = []
        if not plain_text.strip():
            warnings.append(
                "No text content extracted from DOCX - "
                "file may be corrupted or contain only images"
            )
        if conversion.warning_count > 0:
            warnings.append(
                f"Document contains {conversion.warning_count} unsupported elements "
                "that may affect formatting"
            )
        if len(conversion.html) > len(plain_text) * 3:
            warnings.append("Document contains complex formatting that may not be fully preserved")
        return warnings
