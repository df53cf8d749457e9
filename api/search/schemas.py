"""
Search API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel


class SearchRequest(BaseModel):
    # Left optional so an absent list gets the same 400 as an empty one.
    codes: list[str] | None = None


class DocumentOut(BaseModel):
    id: int
    name: str
    date: str
    codes: str
    file_path: str


class SearchResponse(BaseModel):
    codes: list[str]
    documents: list[DocumentOut]
    count: int
    missing_codes: list[str]
