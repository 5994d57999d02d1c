"""Utility helpers for text normalization and URL handling."""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_text(value: Optional[str]) -> str:
    """Collapse whitespace runs (newlines included) and trim the result."""
    if not value:
        return ""
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def is_valid_url(url: Optional[str]) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def resolve_url(href: Optional[str], base_url: str) -> Optional[str]:
    """Resolve ``href`` against ``base_url``; returns None when that fails."""
    if not href:
        return None
    href = href.strip()
    if not href:
        return None
    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def utc_timestamp() -> str:
    """ISO-8601 timestamp in UTC with millisecond precision."""
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def file_timestamp() -> str:
    """Timestamp safe for use in generated filenames."""
    return dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
