"""Structured logging for truthrank (structlog over stdlib logging).

Modules log through ``logging.getLogger(__name__)``; the handler installed
here renders those records through structlog, so every line carries the
service name and, during a pipeline call, the ``request_id`` and policy
``mode`` bound by :func:`bind_request`. Output goes to stderr so
``truthrank rank`` can print its JSON response on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from truthrank.config.settings import ObservabilitySettings

SERVICE_NAME = "truthrank"


class TruthRankLogHandler(logging.StreamHandler):
    """Marker type so repeated setup replaces our handler and nothing else."""


def _add_service(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structlog and route stdlib log records through it.

    Args:
        settings: Observability settings. Uses INFO and JSON if None.
    """
    log_level = settings.log_level.upper() if settings else "INFO"
    log_format = settings.log_format if settings else "json"

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = TruthRankLogHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, TruthRankLogHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level, logging.INFO))


def bind_request(request_id: str, **fields: object) -> None:
    """Attach per-call context (request id, policy mode, ...) to every log line."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)


def clear_request() -> None:
    """Drop the per-call context bound by :func:`bind_request`."""
    structlog.contextvars.clear_contextvars()
