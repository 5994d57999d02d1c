"""Heuristic article extraction from arbitrary listing markup."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Set
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from .models import ArticleRecord
from .utils import clean_text, is_valid_url, resolve_url

logger = logging.getLogger("news_scout")

# Ordered from most to least specific; the first selector that yields an
# article decides the result for the whole document.
CONTAINER_SELECTORS = (
    "article",
    '[class*="article"]',
    '[class*="news"]',
    '[class*="post"]',
    '[id*="article"]',
    '[id*="news"]',
    '[id*="post"]',
    ".news-item",
    ".story",
    ".entry",
    ".card",
    ".item",
    "article.article",
    "article.post",
    "article.story",
)

TITLE_SELECTORS = (
    "h1",
    "h2",
    "h3",
    "h4",
    '[class*="title"]',
    '[class*="headline"]',
    ".entry-title",
    "a[title]",
)
LINK_SELECTORS = ("a[href]", "[href]", "link")
DESCRIPTION_SELECTORS = (
    "p",
    '[class*="excerpt"]',
    '[class*="summary"]',
    '[class*="description"]',
    ".entry-summary",
)
DATE_SELECTORS = ("time", "[datetime]", '[class*="date"]')
AUTHOR_SELECTORS = ('[class*="author"]', '[rel*="author"]')

MIN_DESCRIPTION_CHARS = 20
MAX_DESCRIPTION_CHARS = 500

MIN_LINK_TEXT_CHARS = 15
MAX_LINK_TEXT_CHARS = 200
MAX_LINK_ARTICLES = 50
SKIP_LINK_CLASSES = ("nav", "menu", "footer", "header", "sidebar", "comment")

ARTICLE_URL_PATTERNS = [
    re.compile(r"/news/"),
    re.compile(r"/article/"),
    re.compile(r"/story/"),
    re.compile(r"/post/"),
    re.compile(r"/\d{4}/\d{2}/"),
    re.compile(r"-article-"),
    re.compile(r"-news-"),
]
SKIP_URL_PATTERNS = [
    re.compile(r"/category/"),
    re.compile(r"/tag/"),
    re.compile(r"/author/"),
    re.compile(r"/page/"),
    re.compile(r"\.(pdf|jpg|png|gif)$"),
]
MIN_ARTICLE_PATH_SEGMENTS = 4


def _first_match(element: Tag, selectors: Iterable[str]) -> Iterable[Tag]:
    """Yield the first descendant matching each selector, in selector order."""
    for selector in selectors:
        match = element.select_one(selector)
        if match is not None:
            yield match


def _find_title(element: Tag) -> Optional[str]:
    for match in _first_match(element, TITLE_SELECTORS):
        title = clean_text(match.get_text())
        if title:
            return title
    return None


def _find_url(element: Tag, base_url: str) -> Optional[str]:
    for match in _first_match(element, LINK_SELECTORS):
        resolved = resolve_url(match.get("href"), base_url)
        if resolved:
            return resolved
    return None


def _find_description(element: Tag) -> Optional[str]:
    for match in _first_match(element, DESCRIPTION_SELECTORS):
        raw = match.get_text().strip()
        if len(raw) > MIN_DESCRIPTION_CHARS:
            return clean_text(raw)[:MAX_DESCRIPTION_CHARS]
    return None


def _find_image(element: Tag, base_url: str) -> Optional[str]:
    img = element.find("img")
    if img is None:
        return None
    src = img.get("src") or img.get("data-src")
    resolved = resolve_url(src, base_url)
    if resolved and is_valid_url(resolved):
        return resolved
    return None


def _find_date(element: Tag) -> Optional[str]:
    for match in _first_match(element, DATE_SELECTORS):
        value = match.get("datetime") or match.get_text().strip()
        if value:
            return value
    return None


def _find_author(element: Tag) -> Optional[str]:
    for match in _first_match(element, AUTHOR_SELECTORS):
        author = clean_text(match.get_text())
        if author:
            return author
    return None


def parse_article(element: Tag, base_url: str) -> Optional[ArticleRecord]:
    """Build an article from one container element, or None without title and URL."""
    title = _find_title(element)
    url = _find_url(element, base_url)
    if not title or not is_valid_url(url):
        return None

    return ArticleRecord(
        title=title,
        url=url,
        description=_find_description(element) or "",
        image=_find_image(element, base_url) or "",
        date=_find_date(element) or "",
        author=_find_author(element) or "",
    )


def looks_like_article_url(url: str) -> bool:
    """Guess whether a URL points at an article rather than a listing or asset."""
    path = urlparse(url).path.lower()
    if any(pattern.search(path) for pattern in SKIP_URL_PATTERNS):
        return False
    if any(pattern.search(path) for pattern in ARTICLE_URL_PATTERNS):
        return True
    segments = [segment for segment in path.split("/") if segment]
    return len(segments) >= MIN_ARTICLE_PATH_SEGMENTS


def extract_from_links(soup: BeautifulSoup, base_url: str) -> List[ArticleRecord]:
    """Fallback pass that treats descriptive, article-shaped links as articles."""
    articles: List[ArticleRecord] = []
    seen: Set[str] = set()
    for link in soup.find_all("a", href=True):
        text = link.get_text().strip()
        if not (MIN_LINK_TEXT_CHARS <= len(text) <= MAX_LINK_TEXT_CHARS):
            continue

        class_name = " ".join(link.get("class") or []).lower()
        if any(skip in class_name for skip in SKIP_LINK_CLASSES):
            continue

        url = resolve_url(link["href"], base_url)
        if not url or url in seen:
            continue
        if not is_valid_url(url) or not looks_like_article_url(url):
            continue

        seen.add(url)
        articles.append(ArticleRecord(title=clean_text(text), url=url))
        if len(articles) >= MAX_LINK_ARTICLES:
            break
    return articles


def _extract_with_selector(
    soup: BeautifulSoup,
    selector: str,
    base_url: str,
) -> List[ArticleRecord]:
    articles: List[ArticleRecord] = []
    seen: Set[str] = set()
    for element in soup.select(selector):
        article = parse_article(element, base_url)
        if article is None or article.url in seen:
            continue
        seen.add(article.url)
        articles.append(article)
    return articles


def extract_articles(
    html: str,
    base_url: str,
    selectors: Sequence[str] = CONTAINER_SELECTORS,
) -> List[ArticleRecord]:
    """Extract a deduplicated, document-ordered list of articles from HTML."""
    try:
        soup = BeautifulSoup(html or "", "html.parser")
    except Exception:  # pylint: disable=broad-except
        logger.exception("Could not parse markup from %s", base_url)
        return []

    for selector in selectors:
        articles = _extract_with_selector(soup, selector, base_url)
        if articles:
            logger.debug("Found %d articles using selector %s", len(articles), selector)
            return articles

    articles = extract_from_links(soup, base_url)
    if articles:
        logger.debug("Harvested %d article links from %s", len(articles), base_url)
    return articles
