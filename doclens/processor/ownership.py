from doclens.database.models import DocumentRecord
from doclens.database.repositories.document_repository import DocumentRepository
from doclens.processor.exceptions import ForbiddenError


async def load_owned_document(
    doc_repo: DocumentRepository, document_id: str, user_id: str
) -> DocumentRecord:
    """Load a document and check that ``user_id`` owns it.

    Raises:
        NotFoundError: if the document does not exist.
        ForbiddenError: if it belongs to another user.
    """
    document = await doc_repo.find_by_id(document_id)
    if document.user_id != user_id:
        raise ForbiddenError(f"Access denied to document {document_id}")
    return document
