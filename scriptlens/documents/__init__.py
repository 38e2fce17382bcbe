from scriptlens.documents.base import BaseDocumentProcessor
from scriptlens.documents.models import DocumentFormat, ParsedDocument, ValidationResult
from scriptlens.documents.registry import ProcessorRegistry, processor_registry

__all__ = [
    "BaseDocumentProcessor",
    "DocumentFormat",
    "ParsedDocument",
    "ProcessorRegistry",
    "ValidationResult",
    "processor_registry",
]
