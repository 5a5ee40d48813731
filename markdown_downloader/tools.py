"""Tool definitions for the markdown downloader.

Each tool validates its arguments up front and raises
:class:`InvalidParamsError` for malformed input. Everything that can go wrong
afterwards (network, filesystem, validation of a new directory) is reported
in-band as a failed :class:`ToolResult` so the caller keeps running.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

from .config import ConfigStore, DownloaderConfig
from .fetcher import fetch_markdown
from .storage import (
    list_artifacts,
    resolve_download_path,
    resolve_listing_directory,
    resolve_subdirectory_path,
    write_artifact,
)

logger = logging.getLogger(__name__)


class InvalidParamsError(ValueError):
    """A required argument is missing or has the wrong type."""


class UnknownToolError(LookupError):
    """No tool is registered under the requested name."""


@dataclass(slots=True)
class ToolResult:
    success: bool
    output: str | None = None
    error: str | None = None

    @property
    def text(self) -> str:
        if self.success:
            return self.output or ""
        return self.error or "Unknown error"

    def to_content(self) -> dict[str, Any]:
        """Render as an MCP ``tools/call`` result."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": not self.success,
        }


ToolHandler = Callable[[Mapping[str, Any], ConfigStore], ToolResult]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    parameters: dict[str, Any]
    handler: ToolHandler

    def schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }


@dataclass
class ToolRegistry:
    """Name-indexed collection of tools."""

    _tools: dict[str, ToolDefinition] = field(default_factory=dict)

    def register_tool(self, tool: ToolDefinition) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def schemas(self) -> list[dict[str, Any]]:
        return [tool.schema() for tool in self]

    def call(self, name: str, arguments: Mapping[str, Any] | None, store: ConfigStore) -> ToolResult:
        tool = self.get(name)
        if tool is None:
            raise UnknownToolError(f"Unknown tool: {name}")
        return tool.handler(arguments or {}, store)


# =============================================================================
# Argument helpers
# =============================================================================


def _require_string(arguments: Mapping[str, Any], key: str, message: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidParamsError(message)
    return value


def _optional_string(arguments: Mapping[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidParamsError(f"{key} must be a string")
    return value


# =============================================================================
# Handlers
# =============================================================================


def download_markdown(arguments: Mapping[str, Any], store: ConfigStore) -> ToolResult:
    """Fetch a page as markdown and save it under the download directory."""
    url = _require_string(arguments, "url", "A valid URL must be provided")
    subdirectory = _optional_string(arguments, "subdirectory")

    config = store.load()
    fetched = fetch_markdown(url)
    if not fetched.success:
        return ToolResult(success=False, error=f"Failed to download markdown: {fetched.error}")

    try:
        path = resolve_download_path(config.download_directory, url, subdirectory)
        write_artifact(path, fetched.content or "")
    except (OSError, ValueError) as exc:
        logger.error("Download error for %s: %s", url, exc)
        return ToolResult(success=False, error=f"Failed to download markdown: {exc}")

    return ToolResult(
        success=True,
        output=f"Markdown downloaded and saved as {path.name} in {path.parent}",
    )


def list_downloaded_files(arguments: Mapping[str, Any], store: ConfigStore) -> ToolResult:
    """List entries in the download directory or one of its subdirectories."""
    subdirectory = _optional_string(arguments, "subdirectory")
    config = store.load()

    try:
        directory = resolve_listing_directory(config.download_directory, subdirectory)
        names = list_artifacts(directory)
    except (OSError, ValueError) as exc:
        return ToolResult(success=False, error=f"Failed to list files: {exc}")

    return ToolResult(success=True, output="\n".join(names))


def validate_download_directory(directory: str) -> str | None:
    """Return why ``directory`` cannot be used as the download root, or None."""
    path = Path(directory)
    if not path.is_absolute():
        return f"Directory must be an absolute path: {directory}"
    if not path.exists():
        return f"Directory does not exist: {directory}"
    if not path.is_dir():
        return f"Not a directory: {directory}"
    if not os.access(path, os.W_OK):
        return f"Directory is not writable: {directory}"
    return None


def set_download_directory(arguments: Mapping[str, Any], store: ConfigStore) -> ToolResult:
    """Point the download root at an existing, writable directory."""
    directory = _require_string(arguments, "directory", "A valid directory path must be provided")

    problem = validate_download_directory(directory)
    if problem is not None:
        return ToolResult(success=False, error=f"Failed to set download directory: {problem}")

    store.save(DownloaderConfig(download_directory=directory))
    logger.info("Download directory set to %s", directory)
    return ToolResult(success=True, output=f"Download directory set to: {directory}")


def get_download_directory(arguments: Mapping[str, Any], store: ConfigStore) -> ToolResult:
    return ToolResult(success=True, output=store.load().download_directory)


def create_subdirectory(arguments: Mapping[str, Any], store: ConfigStore) -> ToolResult:
    """Create a subdirectory under the download root; existing ones are fine."""
    name = _require_string(arguments, "name", "A valid subdirectory name must be provided")
    config = store.load()

    try:
        path = resolve_subdirectory_path(config.download_directory, name)
    except (OSError, ValueError) as exc:
        return ToolResult(success=False, error=f"Failed to create subdirectory: {exc}")

    return ToolResult(success=True, output=f"Subdirectory created: {path}")


# =============================================================================
# Registration
# =============================================================================


def register_download_tools(registry: ToolRegistry) -> None:
    registry.register_tool(
        ToolDefinition(
            name="download_markdown",
            description="Download a webpage as markdown using r.jina.ai",
            parameters={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "URL of the webpage to download",
                    },
                    "subdirectory": {
                        "type": "string",
                        "description": "Optional subdirectory to save the file in",
                    },
                },
                "required": ["url"],
            },
            handler=download_markdown,
        )
    )
    registry.register_tool(
        ToolDefinition(
            name="list_downloaded_files",
            description="List all downloaded markdown files",
            parameters={
                "type": "object",
                "properties": {
                    "subdirectory": {
                        "type": "string",
                        "description": "Optional subdirectory to list files from",
                    },
                },
            },
            handler=list_downloaded_files,
        )
    )


def register_directory_tools(registry: ToolRegistry) -> None:
    registry.register_tool(
        ToolDefinition(
            name="set_download_directory",
            description="Set the main local download folder for markdown files",
            parameters={
                "type": "object",
                "properties": {
                    "directory": {
                        "type": "string",
                        "description": "Full path to the download directory",
                    },
                },
                "required": ["directory"],
            },
            handler=set_download_directory,
        )
    )
    registry.register_tool(
        ToolDefinition(
            name="get_download_directory",
            description="Get the current download directory",
            parameters={"type": "object", "properties": {}},
            handler=get_download_directory,
        )
    )
    registry.register_tool(
        ToolDefinition(
            name="create_subdirectory",
            description="Create a new subdirectory in the root download folder",
            parameters={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "Name of the subdirectory to create",
                    },
                },
                "required": ["name"],
            },
            handler=create_subdirectory,
        )
    )


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    register_download_tools(registry)
    register_directory_tools(registry)
    return registry
