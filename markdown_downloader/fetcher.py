"""Fetch markdown renderings of webpages from the r.jina.ai reader."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

import requests

logger = logging.getLogger(__name__)

READER_ENDPOINT = "https://r.jina.ai/"
USER_AGENT = "markdown-downloader/1.0"


@dataclass(slots=True)
class FetchResult:
    """Result of fetching a markdown rendering."""

    url: str
    success: bool
    content: str | None = None
    error: str | None = None
    fetched_at: str | None = None
    status_code: int | None = None
    content_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def build_fetch_url(url: str) -> str:
    """Return the reader URL for ``url``; the target is appended unencoded."""
    return f"{READER_ENDPOINT}{url}"


def fetch_markdown(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> FetchResult:
    """Fetch ``url`` rendered as markdown.

    A single GET is issued with ``Accept: text/markdown``. There is no retry,
    and no timeout unless one is passed in.

    Args:
        url: The webpage to render.
        session: Optional session to issue the request with.
        timeout: Seconds to wait for the reader, ``None`` to wait indefinitely.

    Returns:
        FetchResult with the response body, or the error when the request failed.
    """
    fetched_at = datetime.now(timezone.utc).isoformat()
    http = session if session is not None else requests
    logger.info("Fetching %s", url)

    try:
        response = http.get(
            build_fetch_url(url),
            headers={"Accept": "text/markdown", "User-Agent": USER_AGENT},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Fetch failed for %s: %s", url, e)
        return FetchResult(
            url=url,
            success=False,
            error=f"HTTP request failed: {e}",
            fetched_at=fetched_at,
        )

    return FetchResult(
        url=url,
        success=True,
        content=response.text,
        fetched_at=fetched_at,
        status_code=response.status_code,
        content_type=response.headers.get("Content-Type"),
    )
