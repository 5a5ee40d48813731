#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
_env_file = Path(__file__).parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from markdown_downloader.cli import (
    register_commands as register_downloader_commands,
    serve_cli,
)

LOG_LEVEL_ENV = "MARKDOWN_DOWNLOADER_LOG_LEVEL"


def _build_command_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdown-downloader",
        description=(
            "Download webpages as markdown. Runs the MCP server when no command is given."
        ),
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help=f"Logging verbosity (default: ${LOG_LEVEL_ENV} or INFO).",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    register_downloader_commands(subparsers)
    parser.set_defaults(func=serve_cli)
    return parser


def _configure_logging(level: str) -> None:
    # stdout is reserved for MCP messages and command output
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _dispatch(args: argparse.Namespace) -> int:
    handler = getattr(args, "func", None)
    if handler is None:  # pragma: no cover - defensive guard
        raise ValueError("No handler registered for parsed arguments.")
    return handler(args)


def main(argv: Sequence[str] | None = None) -> int:
    raw_args = list(sys.argv[1:] if argv is None else argv)

    command_parser = _build_command_parser()
    args = command_parser.parse_args(raw_args)
    _configure_logging(args.log_level)
    return _dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
