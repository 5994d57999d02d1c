"""HTTP fetching for listing pages."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import DEFAULT_USER_AGENT

logger = logging.getLogger("news_scout")


class FetchError(Exception):
    """Raised when a page cannot be retrieved (network error, timeout, bad status)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


def fetch_html(
    url: str,
    timeout: float = 30.0,
    user_agent: str = DEFAULT_USER_AGENT,
    session: Optional[requests.Session] = None,
) -> str:
    """GET ``url`` and return the decoded body."""
    http = session or requests.Session()
    logger.debug("Fetching %s", url)
    try:
        resp = http.get(url, timeout=timeout, headers={"User-Agent": user_agent})
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc
    finally:
        if session is None:
            http.close()
    return resp.text
