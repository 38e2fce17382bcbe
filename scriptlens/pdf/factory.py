from scriptlens.config.settings import Settings
from scriptlens.pdf.base import BasePdfExtractor
from scriptlens.pdf.pdfplumber_adapter import PdfPlumberAdapter
from scriptlens.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the correct PDF extractor based on settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        return cls.create_for_engine(settings.pdf_engine)

    @classmethod
    def create_for_engine(cls, engine: str) -> BasePdfExtractor:
        engine = engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
