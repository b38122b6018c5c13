from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OcrResult:
    """Recognized text with the engine's mean confidence in [0, 100]."""

    text: str
    confidence: float


class BaseOcrEngine(ABC):
    """Contract for image OCR adapters."""

    name: str = "ocr"

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> OcrResult:
        """Run one OCR pass over encoded image bytes.

        Raises:
            ExtractionError: if the image cannot be decoded or the engine fails.
        """
