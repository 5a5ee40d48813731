"""Command-line access to the downloader tools and the MCP server."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Mapping

from .config import ConfigStore
from .mcp_server import run_server
from .tools import InvalidParamsError, build_registry

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def _run_tool(name: str, arguments: Mapping[str, Any]) -> int:
    registry = build_registry()
    try:
        result = registry.call(name, arguments, ConfigStore.from_environment())
    except InvalidParamsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID

    if result.success:
        if result.text:
            print(result.text)
        return EXIT_SUCCESS

    print(result.text, file=sys.stderr)
    return EXIT_ERROR


def serve_cli(args: argparse.Namespace) -> int:
    run_server()
    return EXIT_SUCCESS


def download_cli(args: argparse.Namespace) -> int:
    return _run_tool("download_markdown", {"url": args.url, "subdirectory": args.subdirectory})


def list_cli(args: argparse.Namespace) -> int:
    return _run_tool("list_downloaded_files", {"subdirectory": args.subdirectory})


def set_directory_cli(args: argparse.Namespace) -> int:
    return _run_tool("set_download_directory", {"directory": args.directory})


def get_directory_cli(args: argparse.Namespace) -> int:
    return _run_tool("get_download_directory", {})


def create_subdirectory_cli(args: argparse.Namespace) -> int:
    return _run_tool("create_subdirectory", {"name": args.name})


def register_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add downloader subcommands to the main CLI parser."""

    serve_parser = subparsers.add_parser(
        "serve",
        description="Run the MCP server on stdin/stdout until interrupted.",
        help="Run the MCP server over stdio.",
    )
    serve_parser.set_defaults(func=serve_cli)

    download_parser = subparsers.add_parser(
        "download",
        description="Download a webpage as markdown using r.jina.ai.",
        help="Download a webpage as markdown.",
    )
    download_parser.add_argument("url", help="URL of the webpage to download.")
    download_parser.add_argument(
        "--subdirectory",
        default=None,
        help="Subdirectory of the download folder to save the file in.",
    )
    download_parser.set_defaults(func=download_cli)

    list_parser = subparsers.add_parser(
        "list",
        description="List downloaded markdown files.",
        help="List downloaded files.",
    )
    list_parser.add_argument(
        "--subdirectory",
        default=None,
        help="Subdirectory of the download folder to list.",
    )
    list_parser.set_defaults(func=list_cli)

    set_parser = subparsers.add_parser(
        "set-directory",
        description="Set the main local download folder. It must exist and be writable.",
        help="Set the download directory.",
    )
    set_parser.add_argument("directory", help="Full path to the download directory.")
    set_parser.set_defaults(func=set_directory_cli)

    get_parser = subparsers.add_parser(
        "get-directory",
        description="Print the current download directory.",
        help="Show the download directory.",
    )
    get_parser.set_defaults(func=get_directory_cli)

    mkdir_parser = subparsers.add_parser(
        "create-subdirectory",
        description="Create a new subdirectory in the root download folder.",
        help="Create a subdirectory.",
    )
    mkdir_parser.add_argument("name", help="Name of the subdirectory to create.")
    mkdir_parser.set_defaults(func=create_subdirectory_cli)
