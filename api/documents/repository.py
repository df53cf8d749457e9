"""
Document catalog persistence.
All `documents` table SQL lives here.
"""

from __future__ import annotations

from typing import Any

from core import db

DOCUMENT_COLUMNS = """
    id, name, date, codes, file_path,
    original_filename, size_bytes, page_count, created_at, updated_at
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
  id bigserial PRIMARY KEY,
  name text NOT NULL,
  date text NOT NULL,
  codes text NOT NULL,
  file_path text NOT NULL,
  original_filename text,
  size_bytes bigint NOT NULL DEFAULT 0,
  page_count integer,
  created_at timestamptz NOT NULL DEFAULT now(),
  updated_at timestamptz NOT NULL DEFAULT now()
)
"""


async def ensure_schema() -> None:
    await db.execute(SCHEMA_SQL)


async def list_documents() -> list[dict[str, Any]]:
    """
    All documents, newest date first.
    """
    return await db.fetch_all(
        f"""
        SELECT {DOCUMENT_COLUMNS}
        FROM documents
        ORDER BY date DESC, id DESC
        """
    )


async def get_document(document_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {DOCUMENT_COLUMNS}
        FROM documents
        WHERE id = $1
        """,
        document_id,
    )


async def fetch_catalog() -> list[dict[str, Any]]:
    """
    Snapshot used by code search. Insertion order is the catalog order the
    selector falls back on when dates tie.
    """
    return await db.fetch_all(
        """
        SELECT id, name, date, codes, file_path
        FROM documents
        ORDER BY id
        """
    )


async def insert_document(
    *,
    name: str,
    date: str,
    codes: str,
    file_path: str,
    original_filename: str | None,
    size_bytes: int,
    page_count: int | None,
) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO documents (name, date, codes, file_path, original_filename, size_bytes, page_count)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        RETURNING id
        """,
        name,
        date,
        codes,
        file_path,
        original_filename,
        size_bytes,
        page_count,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert document.")
    return int(row["id"])


async def update_document(
    document_id: int,
    *,
    name: str,
    date: str,
    codes: str,
    file_path: str | None = None,
    original_filename: str | None = None,
    size_bytes: int | None = None,
    page_count: int | None = None,
) -> dict[str, Any] | None:
    """
    Update metadata, and the stored file columns when `file_path` is given.

    Returns {"id", "previous_file_path"} or None when the row does not exist.
    """
    return await db.fetch_one(
        """
        WITH previous AS (
          SELECT id, file_path FROM documents WHERE id = $1 FOR UPDATE
        )
        UPDATE documents d
        SET name = $2,
            date = $3,
            codes = $4,
            file_path = COALESCE($5::text, d.file_path),
            original_filename = CASE WHEN $5::text IS NULL THEN d.original_filename ELSE $6::text END,
            size_bytes = COALESCE($7::bigint, d.size_bytes),
            page_count = CASE WHEN $5::text IS NULL THEN d.page_count ELSE $8::integer END,
            updated_at = now()
        FROM previous p
        WHERE d.id = p.id
        RETURNING d.id, p.file_path AS previous_file_path
        """,
        document_id,
        name,
        date,
        codes,
        file_path,
        original_filename,
        size_bytes,
        page_count,
    )


async def delete_document(document_id: int) -> dict[str, Any] | None:
    """
    Hard-delete a row. Returns {"id", "file_path"} or None when not found.
    """
    return await db.fetch_one(
        """
        DELETE FROM documents
        WHERE id = $1
        RETURNING id, file_path
        """,
        document_id,
    )
