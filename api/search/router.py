"""
Search API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter()


@router.post("/api/search", response_model=schemas.SearchResponse)
async def search(request: schemas.SearchRequest) -> schemas.SearchResponse:
    """
    Pick the fewest, most recent documents that cover the requested codes.

    Codes nobody carries come back in `missing_codes` instead of failing the
    whole request.
    """
    return await service.search_by_codes(request.codes)
