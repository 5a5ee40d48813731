"""MCP server exposing the markdown downloader tools over stdio.

Requests and responses are JSON-RPC 2.0 messages, one per line. Logging goes
to stderr because stdout carries the protocol.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

from . import __version__
from .config import ConfigStore
from .tools import InvalidParamsError, ToolRegistry, ToolResult, UnknownToolError, build_registry

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "markdown-downloader"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


def _result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def _call_tool(
    request_id: Any,
    params: dict[str, Any],
    store: ConfigStore,
    registry: ToolRegistry,
) -> dict[str, Any]:
    tool_name = params.get("name")
    if not isinstance(tool_name, str) or not tool_name:
        return _error(request_id, INVALID_PARAMS, "Tool name must be a non-empty string")
    arguments = params.get("arguments") or {}
    if not isinstance(arguments, dict):
        return _error(request_id, INVALID_PARAMS, "Tool arguments must be an object")

    try:
        result = registry.call(tool_name, arguments, store)
    except UnknownToolError:
        return _error(request_id, METHOD_NOT_FOUND, f"Unknown tool: {tool_name}")
    except InvalidParamsError as exc:
        return _error(request_id, INVALID_PARAMS, str(exc))
    except Exception as exc:
        logger.exception("Tool %s failed", tool_name)
        result = ToolResult(success=False, error=f"Tool {tool_name} failed: {exc}")

    return _result(request_id, result.to_content())


def handle_request(
    request: dict[str, Any],
    store: ConfigStore | None = None,
    registry: ToolRegistry | None = None,
) -> dict[str, Any] | None:
    """Handle an MCP JSON-RPC request.

    Returns the response message, or None for notifications.
    """
    if not isinstance(request, dict):
        return _error(None, INVALID_REQUEST, "Invalid Request")

    method = request.get("method")
    request_id = request.get("id")
    params = request.get("params") or {}

    if not isinstance(method, str):
        return _error(request_id, INVALID_REQUEST, "Invalid Request")

    if method.startswith("notifications/"):
        return None

    elif method == "initialize":
        return _result(
            request_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {
                    "resources": {},
                    "tools": {},
                },
                "serverInfo": {
                    "name": SERVER_NAME,
                    "version": __version__,
                },
            },
        )

    elif method == "ping":
        return _result(request_id, {})

    elif method == "tools/list":
        registry = registry or build_registry()
        return _result(request_id, {"tools": registry.schemas()})

    elif method == "tools/call":
        if not isinstance(params, dict):
            return _error(request_id, INVALID_PARAMS, "params must be an object")
        return _call_tool(
            request_id,
            params,
            store or ConfigStore.from_environment(),
            registry or build_registry(),
        )

    return _error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")


def run_server(
    store: ConfigStore | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Run the MCP server, reading from stdin and writing to stdout."""
    store = store or ConfigStore.from_environment()
    registry = build_registry()
    reader = stdin or sys.stdin
    writer = stdout or sys.stdout
    # Undecodable bytes become U+FFFD so the line fails as a parse error
    reconfigure = getattr(reader, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="replace")

    def send(message: dict[str, Any]) -> None:
        writer.write(json.dumps(message) + "\n")
        writer.flush()

    logger.info("Markdown Downloader MCP server running on stdio (config: %s)", store.config_file)
    while True:
        try:
            line = reader.readline()
            if not line:
                break
            if not line.strip():
                continue

            request = json.loads(line)
            response = handle_request(request, store=store, registry=registry)

            if response is not None:
                send(response)

        except json.JSONDecodeError:
            send(_error(None, PARSE_ERROR, "Parse error"))
        except KeyboardInterrupt:
            break

    logger.info("Markdown Downloader MCP server stopped")
