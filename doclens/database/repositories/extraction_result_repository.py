import uuid
from typing import Any

from psycopg.rows import dict_row

from doclens.database.connection import get_connection
from doclens.database.models import ExtractionResultRecord, ProcessingStatus
from doclens.processor.exceptions import NotFoundError

_COLUMNS = """
    id, document_id, extracted_text, summary, confidence, processing_time,
    status, error, created_at, updated_at
"""


def _to_record(row: dict[str, Any]) -> ExtractionResultRecord:
    return ExtractionResultRecord(
        id=row["id"],
        document_id=row["document_id"],
        extracted_text=row["extracted_text"],
        summary=row["summary"],
        confidence=row["confidence"],
        processing_time=row["processing_time"],
        status=ProcessingStatus(row["status"]),
        error=row["error"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ExtractionResultRepository:
    """Database operations for the extraction_results table (one row per document)."""

    async def find_by_document_id(self, document_id: str) -> ExtractionResultRecord | None:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    "SELECT " + _COLUMNS + " FROM extraction_results WHERE document_id = %s",
                    (document_id,),
                )
                row = await cur.fetchone()
        return _to_record(row) if row is not None else None

    async def upsert_processing(self, document_id: str) -> None:
        """Create the row with empty text, or reset an existing one to an empty PROCESSING row."""
        async with get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO extraction_results (id, document_id, extracted_text, status)
                VALUES (%s, %s, '', %s)
                ON CONFLICT (document_id) DO UPDATE
                SET status = EXCLUDED.status,
                    extracted_text = '',
                    summary = NULL,
                    confidence = NULL,
                    processing_time = NULL,
                    error = NULL,
                    updated_at = clock_timestamp()
                """,
                (str(uuid.uuid4()), document_id, ProcessingStatus.PROCESSING.value),
            )
            await conn.commit()

    async def mark_completed(
        self,
        document_id: str,
        *,
        extracted_text: str,
        summary: str | None,
        confidence: float,
        processing_time: int,
    ) -> None:
        """Persist a successful extraction.

        Raises:
            NotFoundError: if the document has no extraction result row.
        """
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE extraction_results
                    SET extracted_text = %s,
                        summary = %s,
                        confidence = %s,
                        processing_time = %s,
                        status = %s,
                        error = NULL,
                        updated_at = clock_timestamp()
                    WHERE document_id = %s
                    """,
                    (
                        extracted_text,
                        summary,
                        confidence,
                        processing_time,
                        ProcessingStatus.COMPLETED.value,
                        document_id,
                    ),
                )
                if cur.rowcount == 0:
                    raise NotFoundError(
                        f"Extraction result for document {document_id} not found"
                    )
            await conn.commit()

    async def mark_failed(self, document_id: str, error: str) -> None:
        """Record a failed extraction, creating the row if it does not exist yet.

        Text and figures from an earlier run are cleared.
        """
        async with get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO extraction_results (id, document_id, extracted_text, status, error)
                VALUES (%s, %s, '', %s, %s)
                ON CONFLICT (document_id) DO UPDATE
                SET status = EXCLUDED.status,
                    error = EXCLUDED.error,
                    extracted_text = '',
                    summary = NULL,
                    confidence = NULL,
                    processing_time = NULL,
                    updated_at = clock_timestamp()
                """,
                (str(uuid.uuid4()), document_id, ProcessingStatus.FAILED.value, error),
            )
            await conn.commit()

    async def delete_for_document(self, document_id: str) -> int:
        """Delete the document's extraction result rows and return how many were removed."""
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "DELETE FROM extraction_results WHERE document_id = %s",
                    (document_id,),
                )
                deleted = cur.rowcount
            await conn.commit()
        return deleted
