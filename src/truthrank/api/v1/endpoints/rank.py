"""Ranking endpoints — Rank a page, merge a page into a result set, classify records.

The core is synchronous CPU-bound code, so the handlers are plain ``def``
functions and FastAPI runs them in its worker thread pool.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from truthrank.api.deps import get_engine
from truthrank.core.engine import TruthRankEngine
from truthrank.models.query import ClassifyRequest, MergeRequest, RankRequest
from truthrank.models.response import ClassifyResponse, RankResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, str]] = {
    422: {"description": "Validation error — invalid request body"},
    500: {"description": "Internal server error — ranking failed"},
}


@router.post(
    "/rank",
    response_model=RankResponse,
    summary="Rank Search Results",
    description=(
        "Classify, filter, score and order one page of raw search-index records.\n\n"
        "**Policy modes:** `safe` (default) hides every flagged record, `moderate` hides "
        "explicit records, `unrestricted` hides nothing, `explicit-only` shows flagged "
        "records only. Unknown modes are treated as `safe`.\n\n"
        "Set `include_hidden: true` to receive hidden records too, marked `visible: false`."
    ),
    responses=_ERROR_RESPONSES,
)
def rank(
    request: RankRequest,
    engine: TruthRankEngine = Depends(get_engine),
) -> RankResponse:
    """Rank one page of raw documents against a query."""
    try:
        return engine.rank(request)
    except Exception as e:
        logger.error("Ranking failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Ranking failed: {e!s}") from e


@router.post(
    "/merge",
    response_model=RankResponse,
    summary="Merge And Re-rank",
    description=(
        "Merge a newly fetched page into a previously accumulated result set by identifier "
        "(incoming fields win) and re-rank the whole merged set against the current query."
    ),
    responses=_ERROR_RESPONSES,
)
def merge(
    request: MergeRequest,
    engine: TruthRankEngine = Depends(get_engine),
) -> RankResponse:
    """Merge a page into an accumulated result set and re-rank it."""
    try:
        return engine.merge(request)
    except Exception as e:
        logger.error("Merge failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Merge failed: {e!s}") from e


@router.post(
    "/classify",
    response_model=ClassifyResponse,
    summary="Classify Records",
    description="Classify raw records for sensitive content without scoring or filtering them.",
    responses=_ERROR_RESPONSES,
)
def classify(
    request: ClassifyRequest,
    engine: TruthRankEngine = Depends(get_engine),
) -> ClassifyResponse:
    """Classify raw documents."""
    try:
        return engine.classify(request.documents)
    except Exception as e:
        logger.error("Classification failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Classification failed: {e!s}") from e
