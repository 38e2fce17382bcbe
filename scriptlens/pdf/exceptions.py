class PdfExtractionError(Exception):
    """Raised when a PDF decoder cannot open or read a document."""
