from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class DocumentFormat(StrEnum):
    PDF = "pdf"
    WORD = "word"
    TEXT = "text"


class ValidationErrorCode(StrEnum):
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    EMPTY_FILE = "EMPTY_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    CORRUPTED_FILE = "CORRUPTED_FILE"


class ValidationWarningCode(StrEnum):
    LARGE_FILE_SIZE = "LARGE_FILE_SIZE"
    LOW_TEXT_CONTENT = "LOW_TEXT_CONTENT"
    POTENTIAL_ENCODING_ISSUE = "POTENTIAL_ENCODING_ISSUE"


@dataclass(frozen=True)
class ValidationIssue:
    """A fatal validation error with remediation hints."""

    code: ValidationErrorCode
    message: str
    details: str = ""
    suggestions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationNotice:
    """A non-fatal validation warning."""

    code: ValidationWarningCode
    message: str
    details: str = ""


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validate() call. Valid exactly when there are no errors."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationNotice] = field(default_factory=list)
    detected_format: DocumentFormat | None = None
    file_size_bytes: int = 0
    is_readable: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def has_error(self, code: ValidationErrorCode) -> bool:
        return any(error.code == code for error in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [
                {
                    "code": str(e.code),
                    "message": e.message,
                    "details": e.details,
                    "suggestions": list(e.suggestions),
                }
                for e in self.errors
            ],
            "warnings": [
                {"code": str(w.code), "message": w.message, "details": w.details}
                for w in self.warnings
            ],
            "detected_format": str(self.detected_format) if self.detected_format else None,
            "file_size_bytes": self.file_size_bytes,
            "is_readable": self.is_readable,
        }


@dataclass(frozen=True)
class DocumentMetadata:
    word_count: int
    character_count: int
    file_size_bytes: int
    page_count: int | None = None
    author: str | None = None
    additional_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ParsedDocument:
    """Normalized plain text of one document plus quality metadata.

    confidence is clamped to [0.1, 1.0]; 0.1 means the text was extracted but
    should not be trusted.
    """

    content: str
    title: str
    metadata: DocumentMetadata
    confidence: float
    warnings: list[str] | None = None
