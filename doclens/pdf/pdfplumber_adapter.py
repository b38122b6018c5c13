import io

import pdfplumber

from doclens.extraction.exceptions import ExtractionError
from doclens.pdf.base import BasePdfExtractor


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts the PDF text layer using pdfplumber."""

    name = "pdfplumber"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"PDF text extraction failed: {exc}") from exc
        return "\n".join(pages).strip()
