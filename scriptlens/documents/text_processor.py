from pathlib import Path

from scriptlens.documents.base import (
    MB,
    BaseDocumentProcessor,
    ValidationState,
    clamp_confidence,
    extract_title,
    format_file_size,
)
from scriptlens.documents.encoding import contains_binary_content, decode_text, detect_encoding
from scriptlens.documents.models import (
    DocumentFormat,
    ParsedDocument,
    ValidationResult,
    ValidationWarningCode,
)

LARGE_TEXT_FILE_BYTES = 5 * MB
LOW_ENCODING_CONFIDENCE = 0.8
LONG_LINE_CHARS = 1000


def calculate_text_confidence(
    content: str,
    encoding: str,
    encoding_confidence: float,
    file_size: int,
) -> float:
    confidence = 1.0
    stripped_length = len(content.strip())
    if stripped_length == 0:
        confidence = 0.1
    elif stripped_length < 50:
        confidence = 0.3

    confidence *= encoding_confidence

    if contains_binary_content(content):
        confidence *= 0.3

    # large file, little decoded text
    if file_size > 0 and len(content) / file_size < 0.5:
        confidence *= 0.7

    if encoding == "binary":
        confidence *= 0.2
    elif encoding == "utf8" and encoding_confidence < 0.6:
        confidence *= 0.8

    return clamp_confidence(confidence)


class TextProcessor(BaseDocumentProcessor):
    """Validates and decodes plain-text screenplays with encoding detection."""

    format = DocumentFormat.TEXT
    label = "TXT"
    max_file_size = 10 * MB
    empty_file_is_error = False

    def _validate_format(self, path: Path, state: ValidationState) -> None:
        if state.file_size_bytes == 0:
            return
        data = path.read_bytes()
        if detect_encoding(data).encoding == "binary":
            state.warn(
                ValidationWarningCode.POTENTIAL_ENCODING_ISSUE,
                "File may contain binary content",
                details="File appears to contain binary data rather than text",
            )
        if len(data) > LARGE_TEXT_FILE_BYTES:
            state.warn(
                ValidationWarningCode.LARGE_FILE_SIZE,
                "Large text file detected",
                details=f"File size: {format_file_size(len(data))}",
            )

    def _decode(self, path: Path, data: bytes, validation: ValidationResult) -> ParsedDocument:
        decoded = decode_text(data)
        content = decoded.content
        lines = content.split("\n")

        additional = {
            "encoding": decoded.encoding,
            "encoding_confidence": decoded.confidence,
            "line_count": len(lines),
            "average_line_length": len(content) / len(lines) if content else 0,
            "has_windows_line_endings": "\r\n" in content,
            "has_mac_line_endings": "\r" in content and "\r\n" not in content,
            "is_empty": not content.strip(),
        }
        metadata = self._build_metadata(content, validation.file_size_bytes, additional=additional)

        warnings: list[str] = []
        if not content.strip():
            warnings.append("Text file is empty")
        if decoded.confidence < LOW_ENCODING_CONFIDENCE:
            warnings.append(
                f"Low confidence in encoding detection ({decoded.encoding}): "
                f"{decoded.confidence * 100:.1f}%"
            )
        if contains_binary_content(content):
            warnings.append("File may contain binary content or use an unsupported encoding")
        longest_line = max(len(line) for line in lines)
        if longest_line > LONG_LINE_CHARS:
            warnings.append(
                f"Very long lines detected (max: {longest_line} characters) - "
                "may indicate formatting issues"
            )

        return ParsedDocument(
            content=content,
            title=extract_title(content, path.stem),
            metadata=metadata,
            warnings=self._collect_warnings(warnings, content),
            confidence=calculate_text_confidence(
                content, decoded.encoding, decoded.confidence, validation.file_size_bytes
            ),
        )
