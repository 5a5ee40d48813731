"""Persisted settings for the markdown downloader.

The only setting is the root download directory. It is stored as JSON under
the per-user config directory and re-read on every operation, so there is no
in-process cache to invalidate.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from . import paths
from .utils import ensure_directory, write_atomic_text

logger = logging.getLogger(__name__)

LoadStatus = Literal["loaded", "created", "defaulted"]


@dataclass(frozen=True, slots=True)
class DownloaderConfig:
    """Settings record; ``download_directory`` is an absolute path string."""

    download_directory: str

    def to_dict(self) -> dict[str, Any]:
        return {"downloadDirectory": self.download_directory}

    @classmethod
    def from_dict(cls, payload: Any) -> "DownloaderConfig":
        if not isinstance(payload, dict):
            raise ValueError("Config file must contain a JSON object.")
        directory = payload.get("downloadDirectory")
        if not isinstance(directory, str) or not directory.strip():
            raise ValueError("Config file is missing a 'downloadDirectory' string.")
        if not Path(directory).is_absolute():
            raise ValueError(f"Config downloadDirectory must be an absolute path: {directory}")
        return cls(download_directory=directory)


@dataclass(frozen=True, slots=True)
class ConfigLoadResult:
    """Outcome of reading the config file.

    Attributes:
        config: The record every caller should use.
        status: ``created`` on first run, ``loaded`` when an existing file was
            read, ``defaulted`` when reading failed and the platform default
            was substituted.
        error: Why the load fell back to the default, if it did.
    """

    config: DownloaderConfig
    status: LoadStatus
    error: str | None = None


class ConfigStore:
    """Load and save :class:`DownloaderConfig` at a fixed location.

    Reads never raise: a missing, unreadable or malformed file degrades to the
    platform default so the server stays usable. Write failures are logged and
    left for the next load to recover from.
    """

    def __init__(self, config_dir: Path, default_download_dir: Path) -> None:
        self.config_dir = Path(config_dir)
        self.default_download_dir = Path(default_download_dir)

    @classmethod
    def from_environment(cls) -> "ConfigStore":
        """Build the store for the current user and platform."""
        return cls(paths.get_config_dir(), paths.get_default_download_dir())

    @property
    def config_file(self) -> Path:
        return self.config_dir / paths.CONFIG_FILENAME

    def default_config(self) -> DownloaderConfig:
        return DownloaderConfig(download_directory=str(self.default_download_dir))

    def load_result(self) -> ConfigLoadResult:
        try:
            ensure_directory(self.config_dir)
            if not self.config_file.exists():
                config = self.default_config()
                self._write(config)
                ensure_directory(Path(config.download_directory))
                logger.info("Created config %s with download directory %s", self.config_file, config.download_directory)
                return ConfigLoadResult(config=config, status="created")

            with open(self.config_file, "r", encoding="utf-8") as f:
                config = DownloaderConfig.from_dict(json.load(f))
            ensure_directory(Path(config.download_directory))
            return ConfigLoadResult(config=config, status="loaded")
        except (OSError, ValueError) as exc:
            logger.warning("Error reading config %s: %s", self.config_file, exc)
            return self._fallback(exc)

    def load(self) -> DownloaderConfig:
        return self.load_result().config

    def save(self, config: DownloaderConfig) -> None:
        try:
            ensure_directory(self.config_dir)
            self._write(config)
            ensure_directory(Path(config.download_directory))
        except OSError as exc:
            logger.error("Error saving config %s: %s", self.config_file, exc)

    def _write(self, config: DownloaderConfig) -> None:
        write_atomic_text(self.config_file, json.dumps(config.to_dict(), indent=2) + "\n")

    def _fallback(self, exc: Exception) -> ConfigLoadResult:
        config = self.default_config()
        try:
            ensure_directory(self.default_download_dir)
        except OSError as mkdir_exc:
            logger.error("Cannot create default download directory %s: %s", self.default_download_dir, mkdir_exc)
        return ConfigLoadResult(config=config, status="defaulted", error=str(exc))
