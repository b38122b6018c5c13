import asyncio

import pytest

from doclens.config.settings import Settings
from doclens.database.models import ProcessingStatus
from doclens.extraction.exceptions import ExtractionError
from doclens.processor.exceptions import (
    ExtractionInProgressError,
    ForbiddenError,
    NotFoundError,
)
from doclens.processor.models import UploadedFileMeta
from doclens.processor.orchestrator import DocumentOrchestrator
from doclens.processor.processor import build_processor
from doclens.worker.task_scheduler import TaskScheduler
from fakes import FakeExtractor


class GatedExtractor(FakeExtractor):
    """Blocks inside extract() until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.entered = asyncio.Event()

    async def extract(self, file_bytes, mime_type, file_name=""):  # type: ignore[no-untyped-def]
        self.entered.set()
        await self.release.wait()
        return await super().extract(file_bytes, mime_type, file_name)


def _upload(storage) -> UploadedFileMeta:  # type: ignore[no-untyped-def]
    path = storage.write("abc.png", b"image-bytes")
    return UploadedFileMeta(
        file_name="abc.png",
        original_name="receipt.png",
        mime_type="image/png",
        file_size=11,
        file_path=path,
    )


@pytest.fixture()
def scheduler() -> TaskScheduler:
    return TaskScheduler()


@pytest.fixture()
def make_orchestrator(doc_repo, extraction_repo, storage, fake_assistant, scheduler):  # type: ignore[no-untyped-def]
    def factory(extractor: FakeExtractor) -> DocumentOrchestrator:
        processor = build_processor(
            doc_repo=doc_repo,
            extraction_repo=extraction_repo,
            storage=storage,
            extractor=extractor,
            assistant=fake_assistant,
            settings=Settings(),
        )
        return DocumentOrchestrator(
            doc_repo=doc_repo,
            extraction_repo=extraction_repo,
            processor=processor,
            scheduler=scheduler,
        )

    return factory


class TestSubmit:
    async def test_returns_pending_document_before_extraction(
        self, make_orchestrator, storage, doc_repo, scheduler
    ) -> None:
        extractor = GatedExtractor()
        orchestrator = make_orchestrator(extractor)

        document = await orchestrator.submit("alice", _upload(storage))

        assert document.upload_status is ProcessingStatus.PENDING
        assert scheduler.is_running(document.id) is True

        extractor.release.set()
        await orchestrator.wait_idle()

        stored = await doc_repo.find_by_id(document.id)
        assert stored.upload_status is ProcessingStatus.COMPLETED
        assert scheduler.is_running(document.id) is False

    async def test_extraction_failure_does_not_reach_caller(
        self, make_orchestrator, storage, doc_repo, extraction_repo
    ) -> None:
        orchestrator = make_orchestrator(FakeExtractor(error=ExtractionError("unreadable")))

        document = await orchestrator.submit("alice", _upload(storage))
        await orchestrator.wait_idle()

        assert (await doc_repo.find_by_id(document.id)).upload_status is ProcessingStatus.FAILED
        result = await extraction_repo.find_by_document_id(document.id)
        assert result is not None
        assert result.error == "unreadable"


class TestReprocess:
    async def test_replaces_previous_result(
        self, make_orchestrator, storage, doc_repo, extraction_repo
    ) -> None:
        extractor = FakeExtractor(text="first run")
        orchestrator = make_orchestrator(extractor)
        document = await orchestrator.submit("alice", _upload(storage))
        await orchestrator.wait_idle()
        first = await extraction_repo.find_by_document_id(document.id)

        extractor.text = "second run"
        await orchestrator.reprocess(document.id, "alice")
        await orchestrator.wait_idle()

        second = await extraction_repo.find_by_document_id(document.id)
        assert first is not None and second is not None
        assert second.id != first.id
        assert second.extracted_text == "second run"
        assert (await doc_repo.find_by_id(document.id)).upload_status is ProcessingStatus.COMPLETED

    async def test_recovers_failed_document(
        self, make_orchestrator, storage, doc_repo
    ) -> None:
        extractor = FakeExtractor(error=ExtractionError("engine down"))
        orchestrator = make_orchestrator(extractor)
        document = await orchestrator.submit("alice", _upload(storage))
        await orchestrator.wait_idle()

        extractor.error = None
        await orchestrator.reprocess(document.id, "alice")
        await orchestrator.wait_idle()

        assert (await doc_repo.find_by_id(document.id)).upload_status is ProcessingStatus.COMPLETED

    async def test_rejected_while_extraction_in_flight(
        self, make_orchestrator, storage, extraction_repo
    ) -> None:
        extractor = GatedExtractor()
        orchestrator = make_orchestrator(extractor)
        document = await orchestrator.submit("alice", _upload(storage))
        await extractor.entered.wait()

        with pytest.raises(ExtractionInProgressError):
            await orchestrator.reprocess(document.id, "alice")

        extractor.release.set()
        await orchestrator.wait_idle()
        result = await extraction_repo.find_by_document_id(document.id)
        assert result is not None
        assert result.status is ProcessingStatus.COMPLETED

    async def test_other_user_is_forbidden(self, make_orchestrator, storage) -> None:
        orchestrator = make_orchestrator(FakeExtractor())
        document = await orchestrator.submit("alice", _upload(storage))
        await orchestrator.wait_idle()

        with pytest.raises(ForbiddenError):
            await orchestrator.reprocess(document.id, "mallory")

    async def test_unknown_document_is_not_found(self, make_orchestrator) -> None:
        orchestrator = make_orchestrator(FakeExtractor())
        with pytest.raises(NotFoundError):
            await orchestrator.reprocess("missing", "alice")


class TestResumeInterrupted:
    async def test_restarts_pending_and_processing_documents(
        self, make_orchestrator, storage, doc_repo
    ) -> None:
        upload = _upload(storage)
        pending = await doc_repo.create(
            user_id="alice",
            file_name=upload.file_name,
            original_name=upload.original_name,
            mime_type=upload.mime_type,
            file_size=upload.file_size,
            file_path=upload.file_path,
        )
        stuck = await doc_repo.create(
            user_id="bob",
            file_name=upload.file_name,
            original_name=upload.original_name,
            mime_type=upload.mime_type,
            file_size=upload.file_size,
            file_path=upload.file_path,
        )
        await doc_repo.update_status(stuck.id, ProcessingStatus.PROCESSING)
        orchestrator = make_orchestrator(FakeExtractor())

        resumed = await orchestrator.resume_interrupted()
        await orchestrator.wait_idle()

        assert resumed == 2
        for document_id in (pending.id, stuck.id):
            stored = await doc_repo.find_by_id(document_id)
            assert stored.upload_status is ProcessingStatus.COMPLETED

    async def test_skips_terminal_documents(self, make_orchestrator, storage) -> None:
        orchestrator = make_orchestrator(FakeExtractor())
        await orchestrator.submit("alice", _upload(storage))
        await orchestrator.wait_idle()

        assert await orchestrator.resume_interrupted() == 0

    async def test_rerun_clears_results_of_earlier_run(
        self, make_orchestrator, storage, doc_repo, extraction_repo
    ) -> None:
        upload = _upload(storage)
        document = await doc_repo.create(
            user_id="alice",
            file_name=upload.file_name,
            original_name=upload.original_name,
            mime_type=upload.mime_type,
            file_size=upload.file_size,
            file_path=upload.file_path,
        )
        await doc_repo.update_status(document.id, ProcessingStatus.PROCESSING)
        await extraction_repo.upsert_processing(document.id)
        await extraction_repo.mark_completed(
            document.id,
            extracted_text="stale text",
            summary="Stale summary",
            confidence=50.0,
            processing_time=9,
        )
        extractor = GatedExtractor()
        orchestrator = make_orchestrator(extractor)

        await orchestrator.resume_interrupted()
        await extractor.entered.wait()

        running = await extraction_repo.find_by_document_id(document.id)
        assert running.status is ProcessingStatus.PROCESSING
        assert running.extracted_text == ""
        assert running.summary is None
        assert running.confidence is None

        extractor.error = ExtractionError("engine down")
        extractor.release.set()
        await orchestrator.wait_idle()

        failed = await extraction_repo.find_by_document_id(document.id)
        assert failed.status is ProcessingStatus.FAILED
        assert failed.error == "engine down"
        assert failed.extracted_text == ""
        assert failed.summary is None
