import asyncio

from doclens.assistant.base import BaseAssistant
from doclens.database.models import ProcessingStatus
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.database.repositories.extraction_result_repository import (
    ExtractionResultRepository,
)
from doclens.extraction.base import BaseTextExtractor
from doclens.interactions.prompts import (
    build_summary_turns,
    clean_summary,
    explain_system_prompt,
)
from doclens.logging.logger import Log
from doclens.processor.exceptions import FileMissingError
from doclens.processor.pipeline import PipelineContext, PipelineStep
from doclens.storage.file_storage import LocalFileStorage


class MarkProcessingStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._doc_repo.update_status(context.document_id, ProcessingStatus.PROCESSING)
        Log.info(f"Document {context.document_id} marked as processing")
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository, storage: LocalFileStorage) -> None:
        self._doc_repo = doc_repo
        self._storage = storage

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = await self._doc_repo.find_by_id(context.document_id)
        try:
            raw_bytes = await asyncio.to_thread(self._storage.read, document.file_path)
        except FileNotFoundError as exc:
            raise FileMissingError(
                f"File for document {context.document_id} not found: {document.file_path}"
            ) from exc
        context.document = document
        context.raw_bytes = raw_bytes
        Log.info(f"Loaded {len(raw_bytes)} bytes for document {context.document_id}")
        return context


class MarkExtractionProcessingStep(PipelineStep):
    def __init__(self, extraction_repo: ExtractionResultRepository) -> None:
        self._extraction_repo = extraction_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._extraction_repo.upsert_processing(context.document_id)
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, extractor: BaseTextExtractor) -> None:
        self._extractor = extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before extraction")
        context.outcome = await self._extractor.extract(
            context.raw_bytes,
            context.document.mime_type,
            context.document.file_name,
        )
        return context


class SummarizeStep(PipelineStep):
    """Adds a one-line summary. Assistant failures are logged and skipped."""

    def __init__(
        self,
        assistant: BaseAssistant,
        *,
        max_chars: int = 150,
        source_chars: int = 3000,
    ) -> None:
        self._assistant = assistant
        self._max_chars = max_chars
        self._source_chars = source_chars

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.outcome is None:
            raise ValueError("PipelineContext.outcome must be set before summarizing")
        text = context.outcome.text
        if not text.strip():
            return context
        try:
            reply = await self._assistant.complete(
                explain_system_prompt(),
                build_summary_turns(text, self._source_chars),
            )
        except Exception as exc:
            Log.warning(
                f"Summary generation failed for document {context.document_id}, "
                f"continuing without it: {exc}"
            )
            return context
        context.summary = clean_summary(reply.text, self._max_chars) or None
        return context


class PersistCompletedStep(PipelineStep):
    def __init__(
        self,
        doc_repo: DocumentRepository,
        extraction_repo: ExtractionResultRepository,
    ) -> None:
        self._doc_repo = doc_repo
        self._extraction_repo = extraction_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.outcome is None:
            raise ValueError("PipelineContext.outcome must be set before persist")
        await self._extraction_repo.mark_completed(
            context.document_id,
            extracted_text=context.outcome.text,
            summary=context.summary,
            confidence=context.outcome.confidence,
            processing_time=context.outcome.processing_time_ms,
        )
        await self._doc_repo.update_status(context.document_id, ProcessingStatus.COMPLETED)
        Log.info(f"Document {context.document_id} completed")
        return context


class MarkFailedStep(PipelineStep):
    """Moves the document and its extraction result to FAILED.

    Each write is attempted even if the other fails, e.g. when the document
    was deleted while it was being processed.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        extraction_repo: ExtractionResultRepository,
    ) -> None:
        self._doc_repo = doc_repo
        self._extraction_repo = extraction_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        Log.error(f"Document {context.document_id} failed: {context.error_message}")
        try:
            await self._doc_repo.update_status(context.document_id, ProcessingStatus.FAILED)
        except Exception as exc:
            Log.error(f"Could not mark document {context.document_id} as failed: {exc}")
        try:
            await self._extraction_repo.mark_failed(context.document_id, context.error_message)
        except Exception as exc:
            Log.error(
                f"Could not record extraction failure for document {context.document_id}: {exc}"
            )
        return context
