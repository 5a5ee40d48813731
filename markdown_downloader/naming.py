"""Turn URLs into artifact filenames."""

from __future__ import annotations

import re
from datetime import datetime, timezone

ARTIFACT_SUFFIX = ".md"

_SCHEME_RE = re.compile(r"^https?://")
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9]")


def sanitize_filename(url: str) -> str:
    """Return a filesystem-safe stem for ``url``.

    The leading ``http://`` or ``https://`` is dropped and every character
    outside ASCII letters and digits becomes a dash. Runs of dashes are kept
    and nothing is truncated, so distinct URLs differing only in punctuation
    can map to the same stem.

    >>> sanitize_filename("https://example.com/page?id=123")
    'example-com-page-id-123'
    """
    return _UNSAFE_RE.sub("-", _SCHEME_RE.sub("", url)).lower()


def datestamp(now: datetime | None = None) -> str:
    """Return the UTC calendar date of ``now`` as ``YYYYMMDD``."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y%m%d")


def generate_filename(url: str, now: datetime | None = None) -> str:
    """Return ``<sanitized-url>-<YYYYMMDD>.md``.

    Downloads of the same URL on the same UTC day share a filename and
    overwrite each other.
    """
    return f"{sanitize_filename(url)}-{datestamp(now)}{ARTIFACT_SUFFIX}"
