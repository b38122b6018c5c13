from collections.abc import Awaitable, Callable

from doclens.database.models import DocumentRecord, ProcessingStatus
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.database.repositories.extraction_result_repository import (
    ExtractionResultRepository,
)
from doclens.logging.logger import Log
from doclens.processor.exceptions import ExtractionInProgressError
from doclens.processor.models import UploadedFileMeta
from doclens.processor.ownership import load_owned_document
from doclens.processor.processor import Processor
from doclens.worker.task_scheduler import TaskScheduler


class DocumentOrchestrator:
    """Drives documents through PENDING -> PROCESSING -> COMPLETED | FAILED.

    Extraction runs as a background task on the event loop; callers get their
    answer before it starts. Only one run per document is in flight at a time:
    a reprocess request while a run is active is rejected.
    """

    def __init__(
        self,
        *,
        doc_repo: DocumentRepository,
        extraction_repo: ExtractionResultRepository,
        processor: Processor,
        scheduler: TaskScheduler,
    ) -> None:
        self._doc_repo = doc_repo
        self._extraction_repo = extraction_repo
        self._processor = processor
        self._scheduler = scheduler

    async def submit(self, user_id: str, upload: UploadedFileMeta) -> DocumentRecord:
        """Persist a PENDING document and start extraction in the background."""
        document = await self._doc_repo.create(
            user_id=user_id,
            file_name=upload.file_name,
            original_name=upload.original_name,
            mime_type=upload.mime_type,
            file_size=upload.file_size,
            file_path=upload.file_path,
        )
        Log.info(f"Document {document.id} submitted by user {user_id}")
        self._schedule(document.id, lambda: self.run_extraction(document.id))
        return document

    async def run_extraction(self, document_id: str) -> None:
        """Run the pipeline once. Failures end in FAILED state and are re-raised."""
        await self._processor.process(document_id)

    async def reprocess(self, document_id: str, user_id: str) -> None:
        """Discard the previous extraction result and run the pipeline again.

        Raises:
            NotFoundError, ForbiddenError: ownership check failed.
            ExtractionInProgressError: an extraction for this document is running.
        """
        await load_owned_document(self._doc_repo, document_id, user_id)

        async def rerun() -> None:
            deleted = await self._extraction_repo.delete_for_document(document_id)
            Log.info(f"Reprocessing document {document_id} ({deleted} previous results removed)")
            await self.run_extraction(document_id)

        self._schedule(document_id, rerun)

    async def resume_interrupted(self) -> int:
        """Restart documents a previous process left PENDING or PROCESSING."""
        documents = await self._doc_repo.find_by_statuses(
            [status for status in ProcessingStatus if not status.is_terminal]
        )
        resumed = 0
        for document in documents:
            if self._scheduler.is_running(document.id):
                continue
            self._schedule(document.id, lambda doc_id=document.id: self.run_extraction(doc_id))
            resumed += 1
        Log.info(f"Resumed {resumed} interrupted documents")
        return resumed

    async def wait_idle(self) -> None:
        """Wait for all background extractions to settle."""
        await self._scheduler.drain()

    def _schedule(self, document_id: str, job: Callable[[], Awaitable[None]]) -> None:
        if not self._scheduler.schedule(document_id, job):
            raise ExtractionInProgressError(
                f"Extraction for document {document_id} is already in progress"
            )
