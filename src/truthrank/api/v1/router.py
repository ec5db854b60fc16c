"""API v1 Router — Ranking, merging, classification and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from truthrank.api.v1.endpoints.health import router as health_router
from truthrank.api.v1.endpoints.rank import router as rank_router

router = APIRouter(tags=["v1"])
router.include_router(rank_router)
router.include_router(health_router)
