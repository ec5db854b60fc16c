"""API dependencies — Resolve the engine the lifespan attached to the app."""

from __future__ import annotations

from fastapi import Request

from truthrank.core.engine import TruthRankEngine


def get_engine(request: Request) -> TruthRankEngine:
    """Return the engine stored on ``app.state`` during startup.

    Raises:
        RuntimeError: If the application has not started (or has shut down).
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("truthrank engine not initialized. Is the server running?")
    return engine
