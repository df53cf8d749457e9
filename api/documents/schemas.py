"""
Document catalog schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class DocumentResponse(BaseModel):
    id: int
    name: str
    date: str
    codes: str
    file_path: str
    original_filename: str | None = None
    size_bytes: int = 0
    page_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]
    count: int


class DocumentCreatedResponse(BaseModel):
    id: int
    file_path: str
    page_count: int


class DocumentChangedResponse(BaseModel):
    ok: bool = True
    id: int
