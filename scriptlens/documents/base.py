"""Shared validation and metadata logic for all document processors.

Validation runs in a fixed order and stops at the first fatal error:

1. the path must exist and be a regular file
2. empty files are rejected (processors may downgrade this to a warning)
3. files above the processor's ceiling are rejected
4. files above 10 MB that are within the ceiling get a warning
5. the extension must map to a known format
6. the file must be readable

Format-specific checks (signatures, trial decodes) run only when all of the
above passed.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from scriptlens.documents.exceptions import (
    DocumentDecodeError,
    DocumentProcessingError,
    UnsupportedFormatError,
    ValidationFailedError,
)
from scriptlens.documents.models import (
    DocumentFormat,
    DocumentMetadata,
    ParsedDocument,
    ValidationErrorCode,
    ValidationIssue,
    ValidationNotice,
    ValidationResult,
    ValidationWarningCode,
)
from scriptlens.logging.logger import Log

MB = 1024 * 1024
LARGE_FILE_WARNING_BYTES = 10 * MB
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0

EXTENSION_FORMATS: dict[str, DocumentFormat] = {
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.WORD,
    ".doc": DocumentFormat.WORD,
    ".txt": DocumentFormat.TEXT,
    ".text": DocumentFormat.TEXT,
}


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and make sure it has exactly one leading dot."""
    return "." + extension.strip().lower().lstrip(".")


def detect_format(extension: str) -> DocumentFormat | None:
    return EXTENSION_FORMATS.get(normalize_extension(extension))


def format_file_size(size_bytes: int) -> str:
    units = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1
    return f"{size:.1f} {units[unit_index]}"


def clamp_confidence(value: float) -> float:
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


def count_words(text: str) -> int:
    return len(text.split())


def extract_title(content: str, fallback: str, embedded: str | None = None) -> str:
    """Pick a document title.

    Embedded metadata wins; otherwise a short first line without a period
    (looks like a title, not a sentence); otherwise the file name.
    """
    if embedded and embedded.strip():
        return embedded.strip()
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        if len(line) < 100 and "." not in line:
            return line
        break
    return fallback


def content_warnings(content: str) -> list[ValidationNotice]:
    """Quality warnings that apply to decoded text of any format."""
    warnings: list[ValidationNotice] = []
    if len(content.strip()) < 50:
        warnings.append(
            ValidationNotice(
                code=ValidationWarningCode.LOW_TEXT_CONTENT,
                message="File contains very little text content",
                details=f"Content length: {len(content)} characters",
            )
        )
    if "\ufffd" in content:
        warnings.append(
            ValidationNotice(
                code=ValidationWarningCode.POTENTIAL_ENCODING_ISSUE,
                message="File may have encoding issues",
                details="Detected replacement characters that may indicate encoding problems",
            )
        )
    return warnings


@dataclass
class ValidationState:
    """Mutable accumulator used while a validation is running."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationNotice] = field(default_factory=list)
    detected_format: DocumentFormat | None = None
    file_size_bytes: int = 0
    is_readable: bool = False

    def fail(
        self,
        code: ValidationErrorCode,
        message: str,
        details: str = "",
        suggestions: list[str] | None = None,
    ) -> None:
        self.errors.append(
            ValidationIssue(code=code, message=message, details=details, suggestions=suggestions or [])
        )

    def warn(self, code: ValidationWarningCode, message: str, details: str = "") -> None:
        self.warnings.append(ValidationNotice(code=code, message=message, details=details))

    def freeze(self) -> ValidationResult:
        return ValidationResult(
            errors=list(self.errors),
            warnings=list(self.warnings),
            detected_format=self.detected_format,
            file_size_bytes=self.file_size_bytes,
            is_readable=self.is_readable,
        )


class BaseDocumentProcessor(ABC):
    """Contract and shared validation for all format processors.

    Subclasses set the class attributes and implement _decode(); they may add
    format checks by overriding _validate_format().
    """

    format: ClassVar[DocumentFormat]
    label: ClassVar[str]
    max_file_size: ClassVar[int]
    empty_file_is_error: ClassVar[bool] = True

    def supported_extensions(self) -> set[str]:
        return {ext for ext, fmt in EXTENSION_FORMATS.items() if fmt == self.format}

    def is_supported(self, extension: str) -> bool:
        return detect_format(extension) == self.format

    def validate(self, path: str | Path) -> ValidationResult:
        """Check that the file can be handed to the decoder.

        Never raises for file problems; they are reported as errors.
        """
        path = Path(path)
        state = ValidationState()
        self._validate_file(path, state)
        if not state.errors:
            self._validate_format(path, state)
        result = state.freeze()
        if not result.is_valid:
            codes = ", ".join(str(e.code) for e in result.errors)
            Log.warning(f"{self.label} validation failed for {path.name}: {codes}")
        return result

    def parse(self, path: str | Path) -> ParsedDocument:
        """Validate and decode a file into plain text with quality metadata.

        Raises:
            UnsupportedFormatError: if the signature or extension is wrong.
            ValidationFailedError: for any other validation error.
            DocumentDecodeError: if the decoder fails on a valid file.
        """
        path = Path(path)
        validation = self.validate(path)
        if not validation.is_valid:
            messages = ", ".join(e.message for e in validation.errors)
            error_cls = (
                UnsupportedFormatError
                if validation.has_error(ValidationErrorCode.UNSUPPORTED_FORMAT)
                else ValidationFailedError
            )
            raise error_cls(f"{self.label} validation failed: {messages}", validation)

        try:
            document = self._decode(path, path.read_bytes(), validation)
        except DocumentProcessingError:
            raise
        except Exception as exc:
            raise DocumentDecodeError(f"Failed to parse {self.label} file: {exc}") from exc

        Log.info(
            f"Parsed {path.name} as {self.format}: "
            f"{document.metadata.word_count} words, confidence {document.confidence:.2f}"
        )
        return document

    @abstractmethod
    def _decode(self, path: Path, data: bytes, validation: ValidationResult) -> ParsedDocument:
        """Turn validated file bytes into a ParsedDocument."""

    def _validate_format(self, path: Path, state: ValidationState) -> None:
        """Hook for signature and structure checks; runs only on valid files."""

    def _validate_file(self, path: Path, state: ValidationState) -> None:
        try:
            if not path.is_file():
                state.fail(
                    ValidationErrorCode.FILE_NOT_FOUND,
                    "Path does not point to a valid file",
                    details=f"Path: {path}",
                    suggestions=[
                        "Verify the file path is correct",
                        "Ensure the path points to a file, not a directory",
                    ],
                )
                return
            size = path.stat().st_size
        except OSError as exc:
            state.fail(
                ValidationErrorCode.FILE_NOT_FOUND,
                "File not found or inaccessible",
                details=str(exc),
                suggestions=["Verify the file path is correct", "Ensure the file exists"],
            )
            return

        state.file_size_bytes = size
        if size == 0:
            if self.empty_file_is_error:
                state.fail(
                    ValidationErrorCode.EMPTY_FILE,
                    "File is empty",
                    details="File size: 0 bytes",
                    suggestions=["Ensure the file contains content"],
                )
                return
            state.warn(
                ValidationWarningCode.LOW_TEXT_CONTENT,
                f"{self.label} file is empty",
                details="File contains no content",
            )

        if size > self.max_file_size:
            state.fail(
                ValidationErrorCode.FILE_TOO_LARGE,
                f"File size exceeds maximum allowed size of {format_file_size(self.max_file_size)}",
                details=f"File size: {format_file_size(size)}",
                suggestions=[
                    "Try compressing the file",
                    "Split large documents into smaller sections",
                    "Use a different file format",
                ],
            )
            return
        if size > LARGE_FILE_WARNING_BYTES:
            state.warn(
                ValidationWarningCode.LARGE_FILE_SIZE,
                f"Large file detected ({format_file_size(size)})",
                details="Processing may take longer than usual",
            )

        state.detected_format = detect_format(path.suffix)
        if state.detected_format is None:
            supported = ", ".join(sorted(EXTENSION_FORMATS))
            state.fail(
                ValidationErrorCode.UNSUPPORTED_FORMAT,
                f"Unsupported file format: {path.suffix or '(none)'}",
                details=f"Supported formats: {supported}",
                suggestions=[
                    "Convert the file to a supported format",
                    f"Supported formats: {supported}",
                ],
            )
            return

        if not os.access(path, os.R_OK):
            state.fail(
                ValidationErrorCode.PERMISSION_DENIED,
                "File is not readable",
                details=f"Read permission denied for {path}",
                suggestions=[
                    "Check file permissions",
                    "Ensure the file is not locked by another application",
                ],
            )
            return
        state.is_readable = True

    @staticmethod
    def _read_head(path: Path, size: int) -> bytes:
        with path.open("rb") as handle:
            return handle.read(size)

    @staticmethod
    def _build_metadata(
        content: str,
        file_size_bytes: int,
        *,
        page_count: int | None = None,
        author: str | None = None,
        additional: dict[str, Any] | None = None,
    ) -> DocumentMetadata:
        return DocumentMetadata(
            word_count=count_words(content),
            character_count=len(content),
            file_size_bytes=file_size_bytes,
            page_count=page_count,
            author=author,
            additional_metadata=additional or {},
        )

    @staticmethod
    def _collect_warnings(specific: list[str], content: str) -> list[str] | None:
        warnings = list(specific)
        warnings.extend(f"{w.code}: {w.message}" for w in content_warnings(content))
        return warnings or None
