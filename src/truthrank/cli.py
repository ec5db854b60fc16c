"""CLI entry point for truthrank.

Subcommands:
  serve  Start the HTTP facade (uvicorn).
  rank   Rank a local JSON dump of search-index records and print the response.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from truthrank import __version__


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from truthrank.config.settings import Settings

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level

    if args.command == "serve":
        return _serve(args, settings)
    return _rank(args, settings)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="truthrank",
        description="truthrank — Truth-ranking and content-safety classification for archival search results",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument("--version", action="version", version=f"truthrank {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Start the HTTP API server")
    serve.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    serve.add_argument("--workers", "-w", type=int, default=None, help="Number of worker processes")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    rank = subparsers.add_parser("rank", help="Rank a JSON file of search-index records")
    rank.add_argument("file", type=str, help="JSON file: a list of records or a {'response': {'docs': [...]}} envelope")
    rank.add_argument("--query", "-q", type=str, default="", help="Search query to rank against")
    rank.add_argument("--mode", "-m", type=str, default=None, help="Content policy mode (default from config)")
    rank.add_argument("--include-hidden", action="store_true", help="Also print records hidden by the policy")
    return parser


def _serve(args: argparse.Namespace, settings: Any) -> int:
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers

    import uvicorn

    uvicorn.run(
        "truthrank.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )
    return 0


def _rank(args: argparse.Namespace, settings: Any) -> int:
    from truthrank.core.engine import TruthRankEngine
    from truthrank.exceptions import TruthRankError
    from truthrank.models.query import RankRequest
    from truthrank.observability.logging import setup_logging

    setup_logging(settings.observability)

    path = Path(args.file)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return 1

    documents = extract_documents(payload)
    if documents is None:
        print(f"Error: {path} holds neither a list of records nor a search response envelope", file=sys.stderr)
        return 1

    try:
        engine = TruthRankEngine(settings)
    except TruthRankError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    response = engine.rank(
        RankRequest(
            query=args.query,
            documents=documents,
            mode=args.mode,
            include_hidden=args.include_hidden,
        )
    )
    print(response.model_dump_json(indent=2))
    return 0


def extract_documents(payload: Any) -> list[dict[str, Any]] | None:
    """Pull the record list out of a bare list or a search response envelope.

    Accepted shapes: ``[...]``, ``{"docs": [...]}``, ``{"documents": [...]}``
    and ``{"response": {"docs": [...]}}``. Non-object entries are dropped.
    """
    if isinstance(payload, dict):
        response = payload.get("response")
        if isinstance(response, dict) and isinstance(response.get("docs"), list):
            payload = response["docs"]
        elif isinstance(payload.get("docs"), list):
            payload = payload["docs"]
        elif isinstance(payload.get("documents"), list):
            payload = payload["documents"]
    if not isinstance(payload, list):
        return None
    return [entry for entry in payload if isinstance(entry, dict)]


if __name__ == "__main__":
    sys.exit(main())
