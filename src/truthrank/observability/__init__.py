"""Observability — structlog-based logging setup and per-request log context."""

from truthrank.observability.logging import bind_request, clear_request, setup_logging

__all__ = ["bind_request", "clear_request", "setup_logging"]
