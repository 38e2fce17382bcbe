from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PdfContent:
    """Raw decoder output for one PDF document."""

    text: str
    page_count: int
    version: str | None = None
    info: dict[str, str] = field(default_factory=dict)


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfContent:
        """Extract text, page count and document info from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content (possibly truncated for trial decodes).

        Returns:
            PdfContent with pages joined by newlines. Info keys use the PDF
            document-information names (Title, Author, Producer, ...).

        Raises:
            PdfExtractionError: if extraction fails for any reason. The message
            keeps the decoder's own wording so callers can classify it.
        """
