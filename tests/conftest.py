from __future__ import annotations

from pathlib import Path

import pytest

from markdown_downloader.config import ConfigStore


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    """Config store rooted in a temporary home directory."""
    return ConfigStore(
        config_dir=tmp_path / "home" / ".config" / "markdown-downloader",
        default_download_dir=tmp_path / "home" / ".markdown-downloads",
    )
