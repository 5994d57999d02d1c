"""Configuration objects and constants for the scraper."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
DEFAULT_OUTPUT_DIR = Path("output")


@dataclass
class ScrapeConfig:
    """Settings used when fetching a single page."""

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class PaginationConfig:
    """Limits applied while following a listing across pages."""

    max_pages: int = 5
    delay_between_pages: float = 1.0
    same_domain_only: bool = True

    def __post_init__(self) -> None:
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be at least 1 (got {self.max_pages})")
        if self.delay_between_pages < 0:
            raise ValueError(
                f"delay_between_pages must not be negative (got {self.delay_between_pages})"
            )


@dataclass
class CrawlConfig:
    """Top-level settings that control fetching, pagination, and output."""

    scrape: ScrapeConfig = field(default_factory=ScrapeConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    output_dir: Path = DEFAULT_OUTPUT_DIR
