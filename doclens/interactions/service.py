from doclens.assistant.base import BaseAssistant
from doclens.database.models import (
    ExtractionResultRecord,
    InteractionRecord,
    InteractionType,
    ProcessingStatus,
)
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.database.repositories.extraction_result_repository import (
    ExtractionResultRepository,
)
from doclens.database.repositories.interaction_repository import InteractionRepository
from doclens.interactions.prompts import (
    DEFAULT_EXPLAIN_PROMPT,
    build_explain_turns,
    build_query_turns,
    explain_system_prompt,
    query_system_prompt,
)
from doclens.logging.logger import Log
from doclens.processor.exceptions import NotReadyError
from doclens.processor.ownership import load_owned_document

MAX_QUESTION_LENGTH = 1000


class InteractionService:
    """Asks the assistant about a document's extracted text and records each exchange."""

    def __init__(
        self,
        *,
        doc_repo: DocumentRepository,
        extraction_repo: ExtractionResultRepository,
        interaction_repo: InteractionRepository,
        assistant: BaseAssistant,
        history_limit: int = 5,
    ) -> None:
        self._doc_repo = doc_repo
        self._extraction_repo = extraction_repo
        self._interaction_repo = interaction_repo
        self._assistant = assistant
        self._history_limit = history_limit

    async def explain(
        self, document_id: str, user_id: str, context: str | None = None
    ) -> InteractionRecord:
        """Explain the document, optionally focused by ``context``.

        Raises:
            NotFoundError, ForbiddenError: ownership check failed.
            NotReadyError: extraction has not completed.
            AssistantUnavailableError, AssistantCallError: assistant failure.
        """
        context = context.strip() if context else None
        extraction = await self._require_completed(document_id, user_id)
        reply = await self._assistant.complete(
            explain_system_prompt(),
            build_explain_turns(extraction.extracted_text, context),
        )
        interaction = await self._interaction_repo.create(
            document_id=document_id,
            interaction_type=InteractionType.EXPLANATION,
            prompt=context or DEFAULT_EXPLAIN_PROMPT,
            response=reply.text,
            tokens_used=reply.tokens_used,
            model=reply.model_id,
        )
        Log.info(f"Recorded explanation {interaction.id} for document {document_id}")
        return interaction

    async def query(
        self, document_id: str, user_id: str, question: str
    ) -> InteractionRecord:
        """Answer ``question`` with the last few interactions as conversation memory.

        Raises:
            ValueError: if the question is blank or too long.
            NotFoundError, ForbiddenError: ownership check failed.
            NotReadyError: extraction has not completed.
            AssistantUnavailableError, AssistantCallError: assistant failure.
        """
        if not question.strip():
            raise ValueError("Question must not be empty")
        if len(question) > MAX_QUESTION_LENGTH:
            raise ValueError(
                f"Question is too long: {len(question)} chars (max {MAX_QUESTION_LENGTH})"
            )
        extraction = await self._require_completed(document_id, user_id)
        history = await self._interaction_repo.list_for_document(
            document_id, limit=self._history_limit
        )
        reply = await self._assistant.complete(
            query_system_prompt(),
            build_query_turns(extraction.extracted_text, question, history),
        )
        interaction = await self._interaction_repo.create(
            document_id=document_id,
            interaction_type=InteractionType.QUERY,
            prompt=question,
            response=reply.text,
            tokens_used=reply.tokens_used,
            model=reply.model_id,
        )
        Log.info(
            f"Recorded query {interaction.id} for document {document_id} "
            f"({len(history)} prior interactions in context)"
        )
        return interaction

    async def _require_completed(
        self, document_id: str, user_id: str
    ) -> ExtractionResultRecord:
        await load_owned_document(self._doc_repo, document_id, user_id)
        extraction = await self._extraction_repo.find_by_document_id(document_id)
        if extraction is None or extraction.status is not ProcessingStatus.COMPLETED:
            raise NotReadyError(f"Text extraction for document {document_id} is not completed yet")
        return extraction
