"""Next-page discovery and validation for paginated listings."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup

from .models import PaginationCandidate
from .utils import resolve_url

logger = logging.getLogger("news_scout")

NEXT_LINK_SELECTORS = (
    "a.next",
    'a[rel="next"]',
    ".pagination a.next",
    ".pagination .next",
    '[class*="pagination"] a[class*="next"]',
    '[class*="paging"] a[class*="next"]',
)
NUMBERED_LINK_SELECTOR = '[class*="pagination"] a, [class*="paging"] a'

PAGE_NUMBER_PATTERNS = (
    re.compile(r"/page/(\d+)"),
    re.compile(r"\?page=(\d+)"),
    re.compile(r"&page=(\d+)"),
    re.compile(r"/p/(\d+)"),
)
PAGE_SUFFIX_PATTERNS = (
    re.compile(r"/page/\d+"),
    re.compile(r"/p/\d+"),
)


def extract_page_number(url: str) -> int:
    """Return the page number encoded in ``url``, defaulting to 1."""
    for pattern in PAGE_NUMBER_PATTERNS:
        match = pattern.search(url)
        if match:
            return int(match.group(1))
    return 1


def _find_explicit_next(soup: BeautifulSoup, current_url: str) -> Optional[str]:
    for selector in NEXT_LINK_SELECTORS:
        for link in soup.select(selector):
            href = (link.get("href") or "").strip()
            if not href or "javascript:" in href.lower():
                continue
            resolved = resolve_url(href, current_url)
            if resolved:
                return resolved
    return None


def _find_numbered_next(soup: BeautifulSoup, current_url: str) -> Optional[str]:
    current_page = extract_page_number(current_url)
    page_links: List[Tuple[int, str]] = []
    for link in soup.select(NUMBERED_LINK_SELECTOR):
        href = link.get("href")
        text = link.get_text().strip()
        if not href:
            continue
        try:
            number = int(text)
        except ValueError:
            continue
        resolved = resolve_url(href, current_url)
        if resolved:
            page_links.append((number, resolved))

    later = [item for item in page_links if item[0] > current_page]
    if not later:
        return None
    # min() keeps document order among equal page numbers.
    return min(later, key=lambda item: item[0])[1]


def build_next_page_url(current_url: str, next_page: int) -> Optional[str]:
    """Synthesise a next-page URL from common pagination URL shapes."""
    parts = urlsplit(current_url)
    appended_path = f"{parts.path.rstrip('/')}/page/{next_page}"
    candidates = (
        re.sub(r"/page/\d+", f"/page/{next_page}", current_url, count=1),
        re.sub(r"\?page=\d+", f"?page={next_page}", current_url, count=1),
        re.sub(r"&page=\d+", f"&page={next_page}", current_url, count=1),
        re.sub(r"/p/\d+", f"/p/{next_page}", current_url, count=1),
        urlunsplit((parts.scheme, parts.netloc, appended_path, parts.query, parts.fragment)),
        f"{current_url}?page={next_page}",
    )
    for candidate in candidates:
        if candidate != current_url:
            return candidate
    return None


def find_next_page(html: str, current_url: str) -> Optional[str]:
    """Locate the next page of a listing using a cascade of strategies."""
    try:
        soup = BeautifulSoup(html or "", "html.parser")
    except Exception:  # pylint: disable=broad-except
        logger.exception("Could not parse markup from %s", current_url)
        return None

    next_url = _find_explicit_next(soup, current_url)
    if next_url:
        logger.debug("Next page from explicit link: %s", next_url)
        return next_url

    next_url = _find_numbered_next(soup, current_url)
    if next_url:
        logger.debug("Next page from numbered pagination: %s", next_url)
        return next_url

    next_url = build_next_page_url(current_url, extract_page_number(current_url) + 1)
    if next_url:
        logger.debug("Next page from URL pattern: %s", next_url)
    return next_url


def find_next_candidate(html: str, current_url: str) -> Optional[PaginationCandidate]:
    next_url = find_next_page(html, current_url)
    if not next_url:
        return None
    return PaginationCandidate(url=next_url, source_url=current_url)


def is_valid_next(
    current_url: str,
    candidate_url: str,
    same_domain_only: bool = True,
) -> bool:
    """Check that ``candidate_url`` plausibly continues the listing at ``current_url``."""
    try:
        current = urlsplit(current_url)
        candidate = urlsplit(candidate_url)
        current_host = current.hostname
        candidate_host = candidate.hostname
    except ValueError:
        return False

    if same_domain_only and current_host != candidate_host:
        return False
    if current_url == candidate_url:
        return False

    base_path = current.path or "/"
    for pattern in PAGE_SUFFIX_PATTERNS:
        base_path = pattern.sub("", base_path, count=1)
    candidate_path = candidate.path or "/"

    return (
        candidate_path.startswith(base_path)
        or "page" in candidate_path
        or "page" in candidate.query
    )
