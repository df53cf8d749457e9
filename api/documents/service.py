"""
Document catalog "service layer".

Independent of FastAPI routing:
- Validate form fields (name, ISO date, codes)
- Validate PDF uploads and count their pages
- Store the file, write the row, clean up replaced/deleted files
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date as date_type
from pathlib import Path

from fastapi import HTTPException, UploadFile
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from core import settings, storage

from . import repository, schemas

ALLOWED_EXTENSIONS = {".pdf"}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentFields:
    name: str
    date: str
    codes: str


@dataclass(frozen=True)
class StoredUpload:
    file_path: str
    original_filename: str
    size_bytes: int
    page_count: int


def validate_fields(name: str | None, date: str | None, codes: str | None) -> DocumentFields:
    name = (name or "").strip()
    date = (date or "").strip()
    codes = (codes or "").strip()
    if not name or not date or not codes:
        raise HTTPException(status_code=400, detail="Missing required fields: name, date, codes.")

    try:
        parsed = date_type.fromisoformat(date)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date. Expected YYYY-MM-DD.")

    return DocumentFields(name=name, date=parsed.isoformat(), codes=codes)


def validate_upload(file: UploadFile) -> str:
    """
    Return the normalized extension if the upload is acceptable.

    Checked by filename because `content_type` is often missing or wrong.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing filename.")

    ext = Path(file.filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
        )
    return ext


def count_pdf_pages(data: bytes) -> int:
    try:
        reader = PdfReader(io.BytesIO(data))
    except (PdfReadError, ValueError, OSError) as e:
        raise HTTPException(
            status_code=422,
            detail="Could not read PDF (file may be corrupted or unsupported).",
        ) from e

    if reader.is_encrypted:
        raise HTTPException(status_code=422, detail="Encrypted PDF is not supported.")

    try:
        pages = len(reader.pages)
    except (PdfReadError, ValueError) as e:
        raise HTTPException(status_code=422, detail="Could not read PDF pages.") from e

    if pages == 0:
        raise HTTPException(status_code=422, detail="PDF has no pages.")
    return pages


async def store_upload(file: UploadFile) -> StoredUpload:
    ext = validate_upload(file)
    data = await storage.read_upload_bytes(file, max_bytes=settings.max_upload_bytes())
    page_count = count_pdf_pages(data)
    return StoredUpload(
        file_path=storage.save_bytes(data, ext),
        original_filename=file.filename or "",
        size_bytes=len(data),
        page_count=page_count,
    )


async def list_documents() -> schemas.DocumentListResponse:
    rows = await repository.list_documents()
    return schemas.DocumentListResponse(
        documents=[schemas.DocumentResponse(**r) for r in rows],
        count=len(rows),
    )


async def get_document(document_id: int) -> schemas.DocumentResponse:
    row = await repository.get_document(document_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Document not found.")
    return schemas.DocumentResponse(**row)


async def create_document(fields: DocumentFields, file: UploadFile) -> schemas.DocumentCreatedResponse:
    upload = await store_upload(file)
    try:
        document_id = await repository.insert_document(
            name=fields.name,
            date=fields.date,
            codes=fields.codes,
            file_path=upload.file_path,
            original_filename=upload.original_filename,
            size_bytes=upload.size_bytes,
            page_count=upload.page_count,
        )
    except Exception:
        storage.delete_file(upload.file_path)
        raise

    logger.info("document_created id=%s file_path=%s pages=%s", document_id, upload.file_path, upload.page_count)
    return schemas.DocumentCreatedResponse(
        id=document_id,
        file_path=upload.file_path,
        page_count=upload.page_count,
    )


async def update_document(
    document_id: int,
    fields: DocumentFields,
    file: UploadFile | None,
) -> schemas.DocumentChangedResponse:
    """
    Update metadata; with a new file, swap it in and drop the old one.
    """
    if file is None:
        row = await repository.update_document(
            document_id,
            name=fields.name,
            date=fields.date,
            codes=fields.codes,
        )
        if row is None:
            raise HTTPException(status_code=404, detail="Document not found.")
        return schemas.DocumentChangedResponse(id=document_id)

    if await repository.get_document(document_id) is None:
        raise HTTPException(status_code=404, detail="Document not found.")

    upload = await store_upload(file)
    try:
        row = await repository.update_document(
            document_id,
            name=fields.name,
            date=fields.date,
            codes=fields.codes,
            file_path=upload.file_path,
            original_filename=upload.original_filename,
            size_bytes=upload.size_bytes,
            page_count=upload.page_count,
        )
    except Exception:
        storage.delete_file(upload.file_path)
        raise

    if row is None:
        # Deleted between the existence check and the update.
        storage.delete_file(upload.file_path)
        raise HTTPException(status_code=404, detail="Document not found.")

    storage.delete_file(str(row["previous_file_path"]))
    logger.info("document_file_replaced id=%s file_path=%s", document_id, upload.file_path)
    return schemas.DocumentChangedResponse(id=document_id)


async def delete_document(document_id: int) -> schemas.DocumentChangedResponse:
    row = await repository.delete_document(document_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Document not found.")

    storage.delete_file(str(row["file_path"]))
    logger.info("document_deleted id=%s", document_id)
    return schemas.DocumentChangedResponse(id=document_id)
