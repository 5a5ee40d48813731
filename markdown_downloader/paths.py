"""Platform-aware locations for settings and downloaded artifacts.

Windows keeps settings under ``%APPDATA%`` and artifacts under the user's
Documents folder. Every other platform uses ``~/.config`` for settings and a
dot-folder in the home directory for artifacts.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

APP_NAME = "markdown-downloader"
CONFIG_FILENAME = "config.json"
DOWNLOADS_FOLDER = "markdown-downloads"


def _is_windows(platform: str | None) -> bool:
    return (platform or sys.platform) == "win32"


def _home(home: Path | None) -> Path:
    return Path(home) if home is not None else Path.home()


def get_config_dir(
    *,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    """Return the per-user directory holding ``config.json``."""
    env = os.environ if environ is None else environ
    if _is_windows(platform):
        base = Path(env.get("APPDATA") or _home(home))
        return base / APP_NAME
    return _home(home) / ".config" / APP_NAME


def get_config_file(
    *,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    return get_config_dir(platform=platform, environ=environ, home=home) / CONFIG_FILENAME


def get_default_download_dir(
    *,
    platform: str | None = None,
    home: Path | None = None,
) -> Path:
    """Return the download root used when nothing has been configured.

    Windows: ``~/Documents/markdown-downloads``
    Linux/macOS: ``~/.markdown-downloads``
    """
    if _is_windows(platform):
        return _home(home) / "Documents" / DOWNLOADS_FOLDER
    return _home(home) / f".{DOWNLOADS_FOLDER}"
