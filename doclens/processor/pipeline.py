from abc import ABC, abstractmethod
from dataclasses import dataclass

from doclens.database.models import DocumentRecord
from doclens.extraction.models import ExtractionOutcome


@dataclass(slots=True)
class PipelineContext:
    document_id: str
    document: DocumentRecord | None = None
    raw_bytes: bytes = b""
    outcome: ExtractionOutcome | None = None
    summary: str | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
