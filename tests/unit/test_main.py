from pathlib import Path

from doclens.assistant.assistant import UnconfiguredAssistant
from doclens.config.settings import Settings
from doclens.main import build_document_service
from doclens.processor.orchestrator import DocumentOrchestrator
from doclens.services.document_service import DocumentService
from doclens.worker.task_scheduler import TaskScheduler
from fakes import FakeAssistant, FakeExtractor


class TestBuildDocumentService:
    def test_wires_service_and_orchestrator(self, tmp_path: Path) -> None:
        settings = Settings(storage_root=str(tmp_path), openai_api_key="")

        service, orchestrator = build_document_service(settings)

        assert isinstance(service, DocumentService)
        assert isinstance(orchestrator, DocumentOrchestrator)
        assert service._orchestrator is orchestrator
        assert isinstance(service._interactions._assistant, UnconfiguredAssistant)
        assert service._storage.root == tmp_path

    def test_accepts_injected_adapters(self, tmp_path: Path) -> None:
        assistant = FakeAssistant()
        scheduler = TaskScheduler()

        service, orchestrator = build_document_service(
            Settings(storage_root=str(tmp_path)),
            extractor=FakeExtractor(),
            assistant=assistant,
            scheduler=scheduler,
        )

        assert service._interactions._assistant is assistant
        assert orchestrator._scheduler is scheduler
