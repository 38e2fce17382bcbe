import re
from pathlib import Path

from scriptlens.documents.base import (
    MB,
    BaseDocumentProcessor,
    ValidationState,
    clamp_confidence,
    extract_title,
)
from scriptlens.documents.exceptions import DocumentDecodeError
from scriptlens.documents.models import (
    DocumentFormat,
    ParsedDocument,
    ValidationErrorCode,
    ValidationResult,
)
from scriptlens.pdf.base import BasePdfExtractor, PdfContent
from scriptlens.pdf.exceptions import PdfExtractionError
from scriptlens.pdf.pdfplumber_adapter import PdfPlumberAdapter

PDF_SIGNATURE = b"%PDF-"
TRIAL_DECODE_BYTES = 1 * MB

_VERSION_RE = re.compile(rb"^%PDF-(\d+\.\d+)")
_ENCRYPT_RE = re.compile(rb"/Encrypt\b")


def describe_decoder_error(message: str) -> str:
    """Classify a decoder error message as password, encryption or corruption."""
    lowered = message.lower()
    if "password" in lowered:
        return "PDF is password protected and cannot be processed"
    if "encrypt" in lowered:
        return "PDF is encrypted and cannot be processed"
    return "PDF appears to be corrupted or invalid"


def calculate_pdf_confidence(text: str, page_count: int, file_size: int) -> float:
    confidence = 1.0
    stripped_length = len(text.strip())
    if stripped_length == 0:
        confidence = 0.1
    elif stripped_length < 100:
        confidence = 0.3

    # under 0.1% text per byte usually means image-heavy pages
    if file_size > 0 and len(text) / file_size < 0.001:
        confidence *= 0.5

    if page_count == 0:
        confidence = 0.1

    # many pages with almost no text: scanned document
    if page_count > 10 and len(text) < 1000:
        confidence *= 0.4

    return clamp_confidence(confidence)


class PdfProcessor(BaseDocumentProcessor):
    """Validates and decodes PDF screenplays through a pluggable extractor."""

    format = DocumentFormat.PDF
    label = "PDF"
    max_file_size = 50 * MB

    def __init__(self, extractor: BasePdfExtractor | None = None) -> None:
        self._extractor = extractor if extractor is not None else PdfPlumberAdapter()

    def _validate_format(self, path: Path, state: ValidationState) -> None:
        head = self._read_head(path, TRIAL_DECODE_BYTES)
        if not head.startswith(PDF_SIGNATURE):
            state.fail(
                ValidationErrorCode.UNSUPPORTED_FORMAT,
                "File does not appear to be a valid PDF",
                details="PDF magic number not found in file header",
                suggestions=[
                    "Ensure the file is a valid PDF",
                    "Try opening the file in a PDF viewer to verify it works",
                    "Re-export or re-save the PDF if possible",
                ],
            )
            return

        if len(head) < state.file_size_bytes:
            # A truncated PDF has no trailer, so only look for an encryption dictionary.
            if _ENCRYPT_RE.search(head):
                self._fail_unreadable(state, "Encrypt dictionary found in file header")
            return

        try:
            self._extractor.extract(head)
        except PdfExtractionError as exc:
            self._fail_unreadable(state, str(exc))

    @staticmethod
    def _fail_unreadable(state: ValidationState, details: str) -> None:
        description = describe_decoder_error(details)
        if description.endswith("corrupted or invalid"):
            suggestions = [
                "Try opening the file in a PDF viewer to verify it works",
                "Re-export or re-save the PDF if possible",
                "Use a different PDF file",
            ]
        else:
            suggestions = [
                "Remove password protection from the PDF",
                "Use an unencrypted version of the PDF",
            ]
        state.fail(
            ValidationErrorCode.CORRUPTED_FILE,
            description,
            details=details,
            suggestions=suggestions,
        )

    def _decode(self, path: Path, data: bytes, validation: ValidationResult) -> ParsedDocument:
        # Files up to TRIAL_DECODE_BYTES were already decoded once by validate();
        # the text always comes from the bytes read by parse().
        try:
            pdf = self._extractor.extract(data)
        except PdfExtractionError as exc:
            raise DocumentDecodeError(
                f"Failed to parse PDF file: {describe_decoder_error(str(exc))} ({exc})"
            ) from exc

        file_size = validation.file_size_bytes
        title = extract_title(pdf.text, path.stem, embedded=pdf.info.get("Title"))
        author = pdf.info.get("Author")
        metadata = self._build_metadata(
            pdf.text,
            file_size,
            page_count=pdf.page_count,
            author=author,
            additional=self._additional_metadata(pdf, data),
        )
        return ParsedDocument(
            content=pdf.text,
            title=title,
            metadata=metadata,
            warnings=self._collect_warnings(self._pdf_warnings(pdf), pdf.text),
            confidence=calculate_pdf_confidence(pdf.text, pdf.page_count, file_size),
        )

    @staticmethod
    def _pdf_warnings(pdf: PdfContent) -> list[str]:
        warnings: list[str] = []
        if pdf.page_count == 0:
            warnings.append("PDF appears to have no pages")
        if not pdf.text.strip():
            warnings.append(
                "No text content extracted from PDF - may be image-based or corrupted"
            )
        if len(pdf.text) < 100 and pdf.page_count > 1:
            warnings.append(
                "Very little text extracted relative to page count - "
                "PDF may contain mostly images"
            )
        return warnings

    @staticmethod
    def _additional_metadata(pdf: PdfContent, data: bytes) -> dict[str, object]:
        version = pdf.version
        if version is None:
            match = _VERSION_RE.match(data)
            version = match.group(1).decode("ascii") if match else None
        return {
            "page_count": pdf.page_count,
            "pdf_version": version,
            "producer": pdf.info.get("Producer"),
            "creator": pdf.info.get("Creator"),
            "creation_date": pdf.info.get("CreationDate"),
            "modification_date": pdf.info.get("ModDate"),
            "title": pdf.info.get("Title"),
            "author": pdf.info.get("Author"),
            "subject": pdf.info.get("Subject"),
            "keywords": pdf.info.get("Keywords"),
        }
