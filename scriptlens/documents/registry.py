from scriptlens.config.settings import Settings
from scriptlens.documents.base import EXTENSION_FORMATS, BaseDocumentProcessor, detect_format
from scriptlens.documents.exceptions import NoProcessorForFormatError, UnsupportedExtensionError
from scriptlens.documents.models import DocumentFormat
from scriptlens.documents.pdf_processor import PdfProcessor
from scriptlens.documents.text_processor import TextProcessor
from scriptlens.documents.word_processor import WordProcessor
from scriptlens.pdf.base import BasePdfExtractor
from scriptlens.pdf.factory import PdfExtractorFactory


class ProcessorRegistry:
    """Maps document formats and file extensions to processor instances.

    Processors are stateless, so one registry can serve concurrent callers.
    """

    def __init__(self, pdf_extractor: BasePdfExtractor | None = None) -> None:
        self._processors: dict[DocumentFormat, BaseDocumentProcessor] = {
            DocumentFormat.PDF: PdfProcessor(pdf_extractor),
            DocumentFormat.WORD: WordProcessor(),
            DocumentFormat.TEXT: TextProcessor(),
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProcessorRegistry":
        return cls(pdf_extractor=PdfExtractorFactory.create(settings))

    def create_processor(self, document_format: DocumentFormat | str) -> BaseDocumentProcessor:
        try:
            return self._processors[DocumentFormat(document_format)]
        except (ValueError, KeyError) as exc:
            raise NoProcessorForFormatError(
                f"No processor available for file type: {document_format}"
            ) from exc

    def create_processor_by_extension(self, extension: str) -> BaseDocumentProcessor:
        document_format = detect_format(extension)
        if document_format not in self._processors:
            raise UnsupportedExtensionError(f"Unsupported file extension: {extension}")
        return self._processors[document_format]

    def is_extension_supported(self, extension: str) -> bool:
        return detect_format(extension) in self._processors

    def list_supported_extensions(self) -> list[str]:
        return [
            extension
            for extension, document_format in EXTENSION_FORMATS.items()
            if document_format in self._processors
        ]

    @property
    def processors(self) -> dict[DocumentFormat, BaseDocumentProcessor]:
        return dict(self._processors)


processor_registry = ProcessorRegistry()
