from collections.abc import Sequence

from doclens.assistant.base import BaseAssistant
from doclens.config.settings import Settings
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.database.repositories.extraction_result_repository import (
    ExtractionResultRepository,
)
from doclens.extraction.base import BaseTextExtractor
from doclens.logging.logger import Log
from doclens.processor.pipeline import PipelineContext, PipelineStep
from doclens.processor.steps import (
    ExtractTextStep,
    LoadDocumentStep,
    MarkExtractionProcessingStep,
    MarkFailedStep,
    MarkProcessingStep,
    PersistCompletedStep,
    SummarizeStep,
)
from doclens.storage.file_storage import LocalFileStorage


class Processor:
    """Runs the extraction pipeline steps for one document.

    Pipeline: mark processing -> load -> mark extraction processing -> extract
    -> summarize -> persist. Any step failure runs ``failed_step`` and re-raises.
    """

    def __init__(self, steps: Sequence[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = list(steps)
        self._failed_step = failed_step

    async def process(self, document_id: str) -> PipelineContext:
        Log.info(f"Processing document {document_id}")
        context = PipelineContext(document_id=document_id)
        try:
            for step in self._steps:
                context = await step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or exc.__class__.__name__
            await self._failed_step.run(context)
            raise
        return context


def build_processor(
    *,
    doc_repo: DocumentRepository,
    extraction_repo: ExtractionResultRepository,
    storage: LocalFileStorage,
    extractor: BaseTextExtractor,
    assistant: BaseAssistant,
    settings: Settings,
) -> Processor:
    """Build the extraction pipeline with all required steps."""
    steps = [
        MarkProcessingStep(doc_repo),
        LoadDocumentStep(doc_repo, storage),
        MarkExtractionProcessingStep(extraction_repo),
        ExtractTextStep(extractor),
        SummarizeStep(
            assistant,
            max_chars=settings.summary_max_chars,
            source_chars=settings.summary_source_chars,
        ),
        PersistCompletedStep(doc_repo, extraction_repo),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(doc_repo, extraction_repo))
