from abc import ABC, abstractmethod

from doclens.extraction.models import ExtractionOutcome


class BaseTextExtractor(ABC):
    """Contract for turning document bytes into plain text."""

    @abstractmethod
    async def extract(
        self, file_bytes: bytes, mime_type: str, file_name: str = ""
    ) -> ExtractionOutcome:
        """Extract text from an image or PDF.

        Args:
            file_bytes: Raw file content.
            mime_type: MIME type reported at upload time.
            file_name: Stored or original file name, used as a PDF hint.

        Returns:
            ExtractionOutcome with text, confidence (0-100) and wall-clock time.

        Raises:
            ExtractionError: on unreadable input or engine failure.
        """
