"""Map download requests to paths under the configured root and persist artifacts.

All functions take the root directory as an argument instead of reading the
config themselves; callers load the config once per operation and pass
``config.download_directory`` in.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from .naming import generate_filename
from .utils import ensure_directory, write_atomic_text

logger = logging.getLogger(__name__)


class PathEscapeError(ValueError):
    """A requested subdirectory would resolve outside the download root."""


def _contained_path(root: str | Path, relative: str) -> Path:
    base = Path(os.path.abspath(root))
    candidate = Path(os.path.normpath(base / relative))
    if candidate != base and base not in candidate.parents:
        raise PathEscapeError(f"'{relative}' resolves outside the download directory {base}")
    return candidate


def resolve_download_path(
    root: str | Path,
    url: str,
    subdirectory: str | None = None,
    *,
    now: datetime | None = None,
) -> Path:
    """Return the artifact path for ``url`` without writing anything.

    With a subdirectory the containing directory is created first. Without
    one the file goes straight into ``root``, which the config store has
    already created.
    """
    filename = generate_filename(url, now)
    if subdirectory:
        directory = ensure_directory(_contained_path(root, subdirectory))
    else:
        directory = Path(os.path.abspath(root))
    return directory / filename


def resolve_listing_directory(root: str | Path, subdirectory: str | None = None) -> Path:
    """Return the directory to list. Existence is checked by the listing itself."""
    if subdirectory:
        return _contained_path(root, subdirectory)
    return Path(os.path.abspath(root))


def resolve_subdirectory_path(root: str | Path, name: str) -> Path:
    """Create ``root/name`` (and missing ancestors) and return it.

    Calling this for an existing directory is a no-op.
    """
    return ensure_directory(_contained_path(root, name))


def write_artifact(path: Path, content: str) -> Path:
    """Write ``content`` verbatim to ``path``, replacing any earlier artifact."""
    write_atomic_text(path, content)
    logger.info("Saved %d characters to %s", len(content), path)
    return path


def list_artifacts(directory: Path) -> list[str]:
    """Return the entry names in ``directory``, sorted.

    Raises ``FileNotFoundError`` when the directory is missing rather than
    reporting an empty listing.
    """
    with os.scandir(directory) as entries:
        return sorted(entry.name for entry in entries)
