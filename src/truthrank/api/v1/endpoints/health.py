"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from truthrank import __version__
from truthrank.api.deps import get_engine
from truthrank.core.engine import TruthRankEngine

router = APIRouter()


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="truthrank server version")
    service: str = Field(description="Service name ('truthrank')")
    default_mode: str = Field(description="Content policy mode applied when a request names none")
    explicit_keywords: int = Field(description="Number of explicit-tier dictionary entries")
    mild_keywords: int = Field(description="Number of mild-tier dictionary entries")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
    description="Returns overall system health, server version, default policy mode and dictionary size.",
)
async def health_check(
    engine: TruthRankEngine = Depends(get_engine),
) -> HealthResponse:
    """Basic health check endpoint with dictionary info."""
    keywords = engine.classifier.keywords
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="truthrank",
        default_mode=engine.default_mode.value,
        explicit_keywords=len(keywords.explicit),
        mild_keywords=len(keywords.mild),
    )
