import uuid
from typing import Any

from psycopg.rows import dict_row

from doclens.database.connection import get_connection
from doclens.database.models import InteractionRecord, InteractionType

_COLUMNS = "id, document_id, type, prompt, response, tokens_used, model, created_at"


def _to_record(row: dict[str, Any]) -> InteractionRecord:
    return InteractionRecord(
        id=row["id"],
        document_id=row["document_id"],
        type=InteractionType(row["type"]),
        prompt=row["prompt"],
        response=row["response"],
        tokens_used=row["tokens_used"],
        model=row["model"],
        created_at=row["created_at"],
    )


class InteractionRepository:
    """Append-only access to the interactions table."""

    async def create(
        self,
        *,
        document_id: str,
        interaction_type: InteractionType,
        prompt: str,
        response: str,
        tokens_used: int | None,
        model: str | None,
    ) -> InteractionRecord:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    INSERT INTO interactions
                        (id, document_id, type, prompt, response, tokens_used, model)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING """
                    + _COLUMNS,
                    (
                        str(uuid.uuid4()),
                        document_id,
                        interaction_type.value,
                        prompt,
                        response,
                        tokens_used,
                        model,
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO interactions returned no row")
        return _to_record(row)

    async def list_for_document(
        self, document_id: str, limit: int | None = None
    ) -> list[InteractionRecord]:
        """Return the document's interactions newest first, optionally capped at ``limit``."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    "SELECT "
                    + _COLUMNS
                    + """
                    FROM interactions
                    WHERE document_id = %s
                    ORDER BY created_at DESC
                    LIMIT %s
                    """,
                    (document_id, limit),
                )
                rows = await cur.fetchall()
        return [_to_record(row) for row in rows]
