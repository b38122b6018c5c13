from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for PDF text-layer extraction adapters."""

    name: str = "pdf"

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the embedded text layer from PDF bytes.

        A PDF without a text layer (e.g. a scan) yields an empty string.

        Raises:
            ExtractionError: if the PDF cannot be parsed.
        """
