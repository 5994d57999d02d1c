"""Data models used throughout the scraping pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from .utils import utc_timestamp


@dataclass
class ArticleRecord:
    """A single article discovered on a listing page."""

    title: str
    url: str
    description: str = ""
    image: str = ""
    date: str = ""
    author: str = ""
    scraped_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "image": self.image,
            "date": self.date,
            "author": self.author,
            "scrapedAt": self.scraped_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArticleRecord":
        scraped_at = data.get("scrapedAt") or data.get("scraped_at") or utc_timestamp()
        return cls(
            title=data.get("title") or "",
            url=data.get("url") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            date=data.get("date") or "",
            author=data.get("author") or "",
            scraped_at=scraped_at,
        )


@dataclass
class PaginationCandidate:
    """A hypothesised next page, kept alongside the page it was found on."""

    url: str
    source_url: str

    def is_valid(self, same_domain_only: bool = True) -> bool:
        from .pagination import is_valid_next

        return is_valid_next(self.source_url, self.url, same_domain_only)


@dataclass
class CrawlState:
    """Mutable state owned by one multi-page crawl."""

    current_url: str
    pages_visited: int = 0
    seen_urls: Set[str] = field(default_factory=set)
    articles: List[ArticleRecord] = field(default_factory=list)
    finished: bool = False

    def add_articles(self, records: Iterable[ArticleRecord]) -> int:
        """Append records whose URL has not been seen yet; returns how many were added."""
        added = 0
        for record in records:
            if record.url in self.seen_urls:
                continue
            self.seen_urls.add(record.url)
            self.articles.append(record)
            added += 1
        return added


@dataclass
class ScrapeResult:
    """Outcome of a one-shot scrape, including where results were saved."""

    success: bool
    articles: List[ArticleRecord] = field(default_factory=list)
    pages_visited: int = 0
    error: Optional[str] = None
    output_paths: Dict[str, Path] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.articles)
