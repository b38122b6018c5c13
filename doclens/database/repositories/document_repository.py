import uuid
from collections.abc import Sequence
from typing import Any

from psycopg.rows import dict_row

from doclens.database.connection import get_connection
from doclens.database.models import (
    DocumentRecord,
    DocumentSummary,
    ExtractionOverview,
    ProcessingStatus,
)
from doclens.processor.exceptions import NotFoundError

_DOCUMENT_COLUMNS = """
    d.id, d.user_id, d.file_name, d.original_name, d.mime_type,
    d.file_size, d.file_path, d.upload_status, d.created_at, d.updated_at
"""


def _to_document(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        user_id=row["user_id"],
        file_name=row["file_name"],
        original_name=row["original_name"],
        mime_type=row["mime_type"],
        file_size=row["file_size"],
        file_path=row["file_path"],
        upload_status=ProcessingStatus(row["upload_status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentRepository:
    """Database operations for the documents table."""

    async def create(
        self,
        *,
        user_id: str,
        file_name: str,
        original_name: str,
        mime_type: str,
        file_size: int,
        file_path: str,
    ) -> DocumentRecord:
        """Insert a document in PENDING state and return the stored row."""
        document_id = str(uuid.uuid4())
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    INSERT INTO documents AS d
                        (id, user_id, file_name, original_name, mime_type,
                         file_size, file_path, upload_status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING """
                    + _DOCUMENT_COLUMNS,
                    (
                        document_id,
                        user_id,
                        file_name,
                        original_name,
                        mime_type,
                        file_size,
                        file_path,
                        ProcessingStatus.PENDING.value,
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO documents returned no row")
        return _to_document(row)

    async def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            NotFoundError: if no document with this ID exists.
        """
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    "SELECT " + _DOCUMENT_COLUMNS + " FROM documents d WHERE d.id = %s",
                    (document_id,),
                )
                row = await cur.fetchone()

        if row is None:
            raise NotFoundError(f"Document {document_id} not found")
        return _to_document(row)

    async def list_for_user(self, user_id: str) -> list[DocumentSummary]:
        """List a user's documents newest first with extraction overview and interaction count."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    "SELECT "
                    + _DOCUMENT_COLUMNS
                    + """,
                           er.status AS er_status,
                           er.confidence AS er_confidence,
                           er.summary AS er_summary,
                           er.extracted_text AS er_extracted_text,
                           er.created_at AS er_created_at,
                           (SELECT COUNT(*) FROM interactions i
                             WHERE i.document_id = d.id) AS interaction_count
                    FROM documents d
                    LEFT JOIN extraction_results er ON er.document_id = d.id
                    WHERE d.user_id = %s
                    ORDER BY d.created_at DESC
                    """,
                    (user_id,),
                )
                rows = await cur.fetchall()

        summaries: list[DocumentSummary] = []
        for row in rows:
            extraction = None
            if row["er_status"] is not None:
                extraction = ExtractionOverview(
                    status=ProcessingStatus(row["er_status"]),
                    confidence=row["er_confidence"],
                    summary=row["er_summary"],
                    extracted_text=row["er_extracted_text"],
                    created_at=row["er_created_at"],
                )
            summaries.append(
                DocumentSummary(
                    document=_to_document(row),
                    extraction=extraction,
                    interaction_count=int(row["interaction_count"]),
                )
            )
        return summaries

    async def find_by_statuses(
        self, statuses: Sequence[ProcessingStatus]
    ) -> list[DocumentRecord]:
        """Find documents in any of the given statuses, oldest first."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    "SELECT "
                    + _DOCUMENT_COLUMNS
                    + " FROM documents d WHERE d.upload_status = ANY(%s) ORDER BY d.created_at",
                    ([status.value for status in statuses],),
                )
                rows = await cur.fetchall()
        return [_to_document(row) for row in rows]

    async def update_status(self, document_id: str, status: ProcessingStatus) -> None:
        """Set the document's upload status.

        Raises:
            NotFoundError: if no document with this ID exists.
        """
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE documents
                    SET upload_status = %s, updated_at = clock_timestamp()
                    WHERE id = %s
                    """,
                    (status.value, document_id),
                )
                if cur.rowcount == 0:
                    raise NotFoundError(f"Document {document_id} not found")
            await conn.commit()

    async def delete(self, document_id: str) -> bool:
        """Delete a document; extraction results and interactions cascade.

        Returns:
            True if a row was deleted.
        """
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                deleted = cur.rowcount > 0
            await conn.commit()
        return deleted
