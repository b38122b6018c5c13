import pymupdf

from doclens.extraction.exceptions import ExtractionError
from doclens.pdf.base import BasePdfExtractor


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts the PDF text layer using PyMuPDF."""

    name = "pymupdf"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise ExtractionError(f"PDF text extraction failed: {exc}") from exc
        return "\n".join(pages).strip()
