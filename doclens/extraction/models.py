from dataclasses import dataclass
from enum import Enum

PDF_MIME_TYPE = "application/pdf"


class FileKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


def resolve_file_kind(mime_type: str, file_name: str = "") -> FileKind:
    """PDF when the MIME type says so or the name ends in .pdf, otherwise an image."""
    if mime_type.lower() == PDF_MIME_TYPE or file_name.lower().endswith(".pdf"):
        return FileKind.PDF
    return FileKind.IMAGE


@dataclass(frozen=True)
class ExtractionOutcome:
    """Output of one extraction call."""

    text: str
    confidence: float
    processing_time_ms: int
