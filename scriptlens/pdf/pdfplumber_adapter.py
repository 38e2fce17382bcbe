import io

import pdfplumber

from scriptlens.pdf.base import BasePdfExtractor, PdfContent
from scriptlens.pdf.exceptions import PdfExtractionError


def _decode_info_value(value: object) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").strip() or None
    if isinstance(value, str):
        return value.strip() or None
    return None


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
                info: dict[str, str] = {}
                for key, value in (pdf.metadata or {}).items():
                    decoded = _decode_info_value(value)
                    if decoded is not None:
                        info[str(key)] = decoded
        except PdfExtractionError:
            raise
        except Exception as exc:
            name = type(exc).__name__
            raise PdfExtractionError(f"pdfplumber extraction failed ({name}): {exc}") from exc
        return PdfContent(
            text="\n".join(pages).strip(),
            page_count=len(pages),
            info=info,
        )
