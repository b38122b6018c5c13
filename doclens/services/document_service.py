import asyncio
import os
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from doclens.database.models import (
    DocumentDetails,
    DocumentRecord,
    DocumentSummary,
    InteractionRecord,
)
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.database.repositories.extraction_result_repository import (
    ExtractionResultRepository,
)
from doclens.database.repositories.interaction_repository import InteractionRepository
from doclens.export.archive_builder import ArchiveBuilder, ExportBundle
from doclens.interactions.service import InteractionService
from doclens.logging.logger import Log
from doclens.processor.exceptions import (
    FileMissingError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from doclens.processor.models import UploadedFileMeta
from doclens.processor.orchestrator import DocumentOrchestrator
from doclens.processor.ownership import load_owned_document
from doclens.storage.file_storage import LocalFileStorage, safe_file_name


@dataclass(frozen=True)
class StoredFile:
    content: bytes
    mime_type: str
    filename: str


class DocumentService:
    """Operations offered to the HTTP layer. Every call checks document ownership."""

    def __init__(
        self,
        *,
        doc_repo: DocumentRepository,
        extraction_repo: ExtractionResultRepository,
        interaction_repo: InteractionRepository,
        orchestrator: DocumentOrchestrator,
        interactions: InteractionService,
        archive_builder: ArchiveBuilder,
        storage: LocalFileStorage,
        allowed_mime_types: Sequence[str],
        max_upload_size_bytes: int,
    ) -> None:
        self._doc_repo = doc_repo
        self._extraction_repo = extraction_repo
        self._interaction_repo = interaction_repo
        self._orchestrator = orchestrator
        self._interactions = interactions
        self._archive_builder = archive_builder
        self._storage = storage
        self._allowed_mime_types = frozenset(m.lower() for m in allowed_mime_types)
        self._max_upload_size_bytes = max_upload_size_bytes

    async def upload_document(
        self,
        user_id: str,
        original_name: str,
        mime_type: str,
        content: bytes,
    ) -> DocumentRecord:
        """Validate and store an upload, then submit it for extraction.

        Raises:
            ValueError: if the upload is empty.
            UnsupportedFileTypeError: if the MIME type is not accepted.
            FileTooLargeError: if the upload exceeds the size limit.
        """
        if not content:
            raise ValueError("No file uploaded")
        if mime_type.lower() not in self._allowed_mime_types:
            raise UnsupportedFileTypeError(
                f"File type {mime_type} not allowed. "
                f"Allowed types: {', '.join(sorted(self._allowed_mime_types))}"
            )
        if len(content) > self._max_upload_size_bytes:
            raise FileTooLargeError(
                f"File is {len(content)} bytes, limit is {self._max_upload_size_bytes}"
            )

        original_name = safe_file_name(original_name)
        extension = os.path.splitext(original_name)[1].lower()
        file_name = f"{uuid.uuid4()}{extension}"
        file_path = await asyncio.to_thread(self._storage.write, file_name, content)
        upload = UploadedFileMeta(
            file_name=file_name,
            original_name=original_name,
            mime_type=mime_type,
            file_size=len(content),
            file_path=file_path,
        )
        try:
            return await self.submit_document(user_id, upload)
        except Exception:
            await asyncio.to_thread(self._storage.delete, file_path)
            raise

    async def submit_document(self, user_id: str, upload: UploadedFileMeta) -> DocumentRecord:
        return await self._orchestrator.submit(user_id, upload)

    async def list_documents(self, user_id: str) -> list[DocumentSummary]:
        return await self._doc_repo.list_for_user(user_id)

    async def get_document(self, document_id: str, user_id: str) -> DocumentDetails:
        """Load a document with its extraction result and interactions, newest first.

        Raises:
            NotFoundError: if the document does not exist.
            ForbiddenError: if it belongs to another user.
        """
        document = await load_owned_document(self._doc_repo, document_id, user_id)
        extraction = await self._extraction_repo.find_by_document_id(document_id)
        interactions = await self._interaction_repo.list_for_document(document_id)
        return DocumentDetails(
            document=document,
            extraction=extraction,
            interactions=interactions,
        )

    async def explain_document(
        self, document_id: str, user_id: str, context: str | None = None
    ) -> InteractionRecord:
        return await self._interactions.explain(document_id, user_id, context)

    async def query_document(
        self, document_id: str, user_id: str, question: str
    ) -> InteractionRecord:
        return await self._interactions.query(document_id, user_id, question)

    async def build_download(self, document_id: str, user_id: str) -> ExportBundle:
        """Bundle the original file and a report of extraction and interactions.

        Raises:
            FileMissingError: if the backing file cannot be read.
        """
        details = await self.get_document(document_id, user_id)
        file_bytes = await self._read_backing_file(details.document)
        bundle = await asyncio.to_thread(self._archive_builder.build, details, file_bytes)
        Log.info(
            f"Built download {bundle.filename} for document {document_id} "
            f"({len(bundle.archive_bytes)} bytes)"
        )
        return bundle

    async def read_original_file(self, document_id: str, user_id: str) -> StoredFile:
        document = await load_owned_document(self._doc_repo, document_id, user_id)
        content = await self._read_backing_file(document)
        return StoredFile(
            content=content,
            mime_type=document.mime_type,
            filename=document.original_name,
        )

    async def delete_document(self, document_id: str, user_id: str) -> None:
        """Delete the document and its children. File removal is best effort."""
        document = await load_owned_document(self._doc_repo, document_id, user_id)
        try:
            removed = await asyncio.to_thread(self._storage.delete, document.file_path)
            if not removed:
                Log.warning(f"File for document {document_id} was already gone")
        except OSError as exc:
            Log.warning(f"Failed to delete file for document {document_id}: {exc}")
        await self._doc_repo.delete(document_id)
        Log.info(f"Document {document_id} deleted")

    async def reprocess_document(self, document_id: str, user_id: str) -> None:
        await self._orchestrator.reprocess(document_id, user_id)

    async def _read_backing_file(self, document: DocumentRecord) -> bytes:
        try:
            return await asyncio.to_thread(self._storage.read, document.file_path)
        except OSError as exc:
            Log.error(f"Backing file for document {document.id} unreadable: {exc}")
            raise FileMissingError(
                f"File not found on server. Path: {document.file_path}"
            ) from exc
