"""Small filesystem helpers shared by the config store and artifact storage."""

from __future__ import annotations

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and any missing parents. Existing directories are left alone."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_atomic_text(path: Path, content: str) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    try:
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
