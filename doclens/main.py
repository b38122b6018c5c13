import asyncio
from pathlib import Path

from doclens.assistant.base import BaseAssistant
from doclens.assistant.factory import AssistantFactory
from doclens.config.settings import Settings
from doclens.database.connection import apply_schema, close_pool, init_pool
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.database.repositories.extraction_result_repository import (
    ExtractionResultRepository,
)
from doclens.database.repositories.interaction_repository import InteractionRepository
from doclens.export.archive_builder import ArchiveBuilder
from doclens.extraction.base import BaseTextExtractor
from doclens.extraction.factory import build_text_extractor
from doclens.interactions.service import InteractionService
from doclens.logging.logger import Log
from doclens.processor.orchestrator import DocumentOrchestrator
from doclens.processor.processor import build_processor
from doclens.services.document_service import DocumentService
from doclens.storage.file_storage import LocalFileStorage
from doclens.worker.task_scheduler import TaskScheduler


def build_document_service(
    settings: Settings,
    *,
    extractor: BaseTextExtractor | None = None,
    assistant: BaseAssistant | None = None,
    scheduler: TaskScheduler | None = None,
) -> tuple[DocumentService, DocumentOrchestrator]:
    """Wire the service and orchestrator. Adapters can be swapped for tests."""
    storage = LocalFileStorage(Path(settings.storage_root))
    doc_repo = DocumentRepository()
    extraction_repo = ExtractionResultRepository()
    interaction_repo = InteractionRepository()
    extractor = extractor or build_text_extractor(settings)
    assistant = assistant or AssistantFactory.create(settings)

    processor = build_processor(
        doc_repo=doc_repo,
        extraction_repo=extraction_repo,
        storage=storage,
        extractor=extractor,
        assistant=assistant,
        settings=settings,
    )
    orchestrator = DocumentOrchestrator(
        doc_repo=doc_repo,
        extraction_repo=extraction_repo,
        processor=processor,
        scheduler=scheduler or TaskScheduler(),
    )
    interactions = InteractionService(
        doc_repo=doc_repo,
        extraction_repo=extraction_repo,
        interaction_repo=interaction_repo,
        assistant=assistant,
        history_limit=settings.query_history_limit,
    )
    service = DocumentService(
        doc_repo=doc_repo,
        extraction_repo=extraction_repo,
        interaction_repo=interaction_repo,
        orchestrator=orchestrator,
        interactions=interactions,
        archive_builder=ArchiveBuilder(),
        storage=storage,
        allowed_mime_types=settings.allowed_mime_types,
        max_upload_size_bytes=settings.max_upload_size_bytes,
    )
    return service, orchestrator


async def resume(settings: Settings) -> int:
    """Open the pool, ensure the schema, rerun interrupted documents and wait for them."""
    await init_pool(settings)
    try:
        await apply_schema()
        _service, orchestrator = build_document_service(settings)
        resumed = await orchestrator.resume_interrupted()
        await orchestrator.wait_idle()
        return resumed
    finally:
        await close_pool()


def main() -> None:
    """Entry point: resume documents left unfinished by a previous process."""
    settings = Settings()
    Log.configure(settings.log_level)
    resumed = asyncio.run(resume(settings))
    Log.info(f"Finished {resumed} interrupted documents")


if __name__ == "__main__":
    main()
