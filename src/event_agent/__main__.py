"""Entry point for ``python -m event_agent``.

Uses stdlib :mod:`argparse` for argument parsing.

Subcommands:
    serve   -- Run the webhook server with uvicorn.
    extract -- Process one message as a manual submission and print the
               JSON result.

Exit codes:
    0 -- Success (including printing help when no subcommand is given).
    1 -- An error occurred (configuration, extraction).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import json
import sys

from event_agent.config import ConfigError, load_settings
from event_agent.exceptions import ExtractionError, InputValidationError
from event_agent.log import setup_logging
from event_agent.normalizer import normalize_manual
from event_agent.pipeline import build_pipeline
from event_agent.responder import ChannelResponder


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="event-agent",
        description="Turn event announcements into published calendar events.",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- "serve" subcommand -------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Run the webhook server.")
    serve_parser.add_argument(
        "--host", type=str, default=None, help="Bind address (defaults to HOST from config)."
    )
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Port (defaults to PORT from config)."
    )
    serve_parser.add_argument(
        "-v", "--verbose", action="store_true", default=False, help="Enable debug-level logging."
    )

    # --- "extract" subcommand -----------------------------------------
    extract_parser = subparsers.add_parser(
        "extract", help="Process one announcement and print the result as JSON."
    )
    extract_parser.add_argument("message", type=str, help="The announcement text.")
    extract_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Extract and validate the event but do not publish it.",
    )
    extract_parser.add_argument(
        "-v", "--verbose", action="store_true", default=False, help="Enable debug-level logging."
    )

    return parser


def _handle_serve(args: argparse.Namespace, log_level: str | None) -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging(log_level or settings.log_level)

    import uvicorn

    from event_agent.server import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


def _handle_extract(args: argparse.Namespace, log_level: str | None) -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging(log_level or settings.log_level)

    try:
        message = normalize_manual({"message": args.message})
    except InputValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    pipeline = build_pipeline(settings)
    try:
        outcome = pipeline.run(message, dry_run=args.dry_run)
    except ExtractionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        pipeline.close()

    reply = ChannelResponder().respond(outcome)
    print(json.dumps(reply.body, indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the event-agent CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    log_level = "DEBUG" if args.verbose else None
    if args.command == "serve":
        return _handle_serve(args, log_level)
    return _handle_extract(args, log_level)


if __name__ == "__main__":
    raise SystemExit(main())
