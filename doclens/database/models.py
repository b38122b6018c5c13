from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ProcessingStatus(str, Enum):
    """Lifecycle status shared by documents and extraction results."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingStatus.COMPLETED, ProcessingStatus.FAILED)


class InteractionType(str, Enum):
    EXPLANATION = "EXPLANATION"
    QUERY = "QUERY"


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: str
    user_id: str
    file_name: str
    original_name: str
    mime_type: str
    file_size: int
    file_path: str
    upload_status: ProcessingStatus = ProcessingStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ExtractionResultRecord:
    """Represents a row from the extraction_results table."""

    id: str
    document_id: str
    extracted_text: str = ""
    summary: str | None = None
    confidence: float | None = None
    processing_time: int | None = None
    status: ProcessingStatus = ProcessingStatus.PENDING
    error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class InteractionRecord:
    """Represents a row from the interactions table. Rows are never updated."""

    id: str
    document_id: str
    type: InteractionType
    prompt: str
    response: str
    tokens_used: int | None = None
    model: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ExtractionOverview:
    """Extraction fields shown next to a document in listings."""

    status: ProcessingStatus
    confidence: float | None = None
    summary: str | None = None
    extracted_text: str = ""
    created_at: datetime | None = None


@dataclass
class DocumentSummary:
    """A document as listed for its owner: extraction overview plus interaction count."""

    document: DocumentRecord
    extraction: ExtractionOverview | None = None
    interaction_count: int = 0


@dataclass
class DocumentDetails:
    """A document with its extraction result and interactions, newest first."""

    document: DocumentRecord
    extraction: ExtractionResultRecord | None = None
    interactions: list[InteractionRecord] = field(default_factory=list)
