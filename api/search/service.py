"""
Search orchestration.

1) Validate requested codes (before touching the DB)
2) Load a catalog snapshot
3) Run the greedy coverage selector
"""

from __future__ import annotations

import logging

from fastapi import HTTPException

from documents import repository as document_repository

from . import schemas, selector

logger = logging.getLogger(__name__)


async def load_catalog() -> list[selector.Document]:
    rows = await document_repository.fetch_catalog()
    return [selector.Document.from_row(r) for r in rows]


async def search_by_codes(codes: list[str] | None) -> schemas.SearchResponse:
    try:
        requested = selector.normalize_requested(codes)
    except selector.RequestError as e:
        raise HTTPException(status_code=400, detail="Invalid or empty codes.") from e

    catalog = await load_catalog()
    result = selector.select_with_coverage(catalog, requested)

    logger.info(
        "search_done requested=%s selected=%s missing=%s catalog_size=%s",
        len(result.requested_codes),
        len(result.documents),
        len(result.missing_codes),
        len(catalog),
    )

    return schemas.SearchResponse(
        codes=result.requested_codes,
        documents=[schemas.DocumentOut(**d.as_dict()) for d in result.documents],
        count=len(result.documents),
        missing_codes=result.missing_codes,
    )
