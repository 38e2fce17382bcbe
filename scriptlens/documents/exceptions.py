from scriptlens.documents.models import ValidationResult


class DocumentProcessingError(Exception):
    """Base exception for all document processing errors."""


class ValidationFailedError(DocumentProcessingError):
    """Raised by parse() when the file does not pass validation."""

    def __init__(self, message: str, result: ValidationResult) -> None:
        super().__init__(message)
        self.result = result


class UnsupportedFormatError(ValidationFailedError):
    """Raised when the file signature or extension does not match a known format."""


class DocumentDecodeError(DocumentProcessingError):
    """Raised when the underlying decoder fails on a validated file."""


class NoProcessorForFormatError(DocumentProcessingError):
    """Raised when no processor is registered for the requested format."""


class UnsupportedExtensionError(DocumentProcessingError):
    """Raised when a file extension does not map to any processor."""
