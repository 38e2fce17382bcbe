import pymupdf

from scriptlens.pdf.base import BasePdfExtractor, PdfContent
from scriptlens.pdf.exceptions import PdfExtractionError

# PyMuPDF metadata keys mapped to PDF document-information names.
_INFO_KEYS = {
    "title": "Title",
    "author": "Author",
    "subject": "Subject",
    "keywords": "Keywords",
    "creator": "Creator",
    "producer": "Producer",
    "creationDate": "CreationDate",
    "modDate": "ModDate",
}


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise PdfExtractionError("Password required: document is encrypted")
                pages = [page.get_text() for page in doc]
                metadata = doc.metadata or {}
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc

        info = {
            _INFO_KEYS[key]: str(value).strip()
            for key, value in metadata.items()
            if key in _INFO_KEYS and value
        }
        fmt = str(metadata.get("format") or "")
        version = fmt.removeprefix("PDF ").strip() or None
        return PdfContent(
            text="\n".join(pages).strip(),
            page_count=len(pages),
            version=version,
            info=info,
        )
