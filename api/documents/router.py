"""
FastAPI router for the document catalog.
"""

from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from . import schemas, service

router = APIRouter(prefix="/api/documents")


@router.get("", response_model=schemas.DocumentListResponse)
async def list_documents() -> schemas.DocumentListResponse:
    """
    All documents, newest date first.
    """
    return await service.list_documents()


@router.get("/{document_id}", response_model=schemas.DocumentResponse)
async def get_document(document_id: int) -> schemas.DocumentResponse:
    return await service.get_document(document_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.DocumentCreatedResponse,
)
async def create_document(
    file: UploadFile | None = File(default=None),
    name: str = Form(default=""),
    date: str = Form(default=""),
    codes: str = Form(default=""),
) -> schemas.DocumentCreatedResponse:
    """
    Upload a PDF with its name, ISO date and comma-separated codes.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No PDF file uploaded.")
    fields = service.validate_fields(name, date, codes)
    return await service.create_document(fields, file)


@router.put("/{document_id}", response_model=schemas.DocumentChangedResponse)
async def update_document(
    document_id: int,
    file: UploadFile | None = File(default=None),
    name: str = Form(default=""),
    date: str = Form(default=""),
    codes: str = Form(default=""),
) -> schemas.DocumentChangedResponse:
    """
    Update metadata. Sending `file` replaces the stored PDF.
    """
    if file is not None and not file.filename:
        # Browsers post an empty part when no file was chosen.
        file = None
    fields = service.validate_fields(name, date, codes)
    return await service.update_document(document_id, fields, file)


@router.delete("/{document_id}", response_model=schemas.DocumentChangedResponse)
async def delete_document(document_id: int) -> schemas.DocumentChangedResponse:
    return await service.delete_document(document_id)
