"""HTTP retrieval of the target page."""

from __future__ import annotations

import requests

from page_ingest.core.errors import ErrorKind, IngestError
from page_ingest.core.logging import get_logger
from page_ingest.ingest.types import FetchedPage

logger = get_logger(__name__)


def fetch_page(
    url: str,
    timeout: float = 30.0,
    user_agent: str | None = None,
    session: requests.Session | None = None,
) -> FetchedPage:
    """GET ``url`` and return its decoded body; any transport failure is a FETCH_ERROR."""
    headers = {"User-Agent": user_agent} if user_agent else None
    getter = session.get if session is not None else requests.get
    try:
        resp = getter(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise IngestError(ErrorKind.FETCH_ERROR, f"Failed to fetch {url}: {exc}") from exc
    logger.debug("Fetched %s (%s, %d bytes)", url, resp.status_code, len(resp.content))
    return FetchedPage(url=url, status_code=resp.status_code, body=resp.text)


__all__ = ["fetch_page"]
