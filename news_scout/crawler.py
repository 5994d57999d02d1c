"""High-level orchestration for scraping one or more listing pages."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from functools import partial
from typing import Callable, List, Optional

from .config import CrawlConfig
from .content import extract_articles
from .fetcher import FetchError, fetch_html
from .models import ArticleRecord, CrawlState, ScrapeResult
from .pagination import find_next_candidate
from .storage import ACCUMULATED_FILENAME, ArticleStorage

logger = logging.getLogger("news_scout")

Fetch = Callable[[str], str]


@dataclass
class ScrapeJob:
    """What to scrape and how to persist it."""

    url: str
    max_pages: int = 1
    use_pagination: bool = False
    fmt: str = "json"
    filename: Optional[str] = None
    append: bool = False


def _default_fetch(config: CrawlConfig) -> Fetch:
    return partial(
        fetch_html,
        timeout=config.scrape.timeout,
        user_agent=config.scrape.user_agent,
    )


async def _fetch_page(fetch: Fetch, url: str) -> str:
    return await asyncio.to_thread(fetch, url)


async def crawl_pages(
    url: str,
    config: CrawlConfig,
    fetch: Optional[Fetch] = None,
) -> CrawlState:
    """Walk a listing page by page, merging articles until a stop condition fires.

    A fetch failure on the first page propagates as :class:`FetchError`. Failures
    on later pages end the crawl early and keep what was collected.
    """
    fetch = fetch or _default_fetch(config)
    limits = config.pagination
    state = CrawlState(current_url=url)

    while not state.finished:
        state.pages_visited += 1
        page_url = state.current_url
        logger.info("Scraping page %d: %s", state.pages_visited, page_url)

        try:
            html = await _fetch_page(fetch, page_url)
        except FetchError as exc:
            if state.pages_visited == 1:
                raise
            logger.warning("Stopping at page %d: %s", state.pages_visited, exc)
            state.pages_visited -= 1
            state.finished = True
            break

        added = state.add_articles(extract_articles(html, page_url))
        logger.info("Found %d new articles on page %d", added, state.pages_visited)

        if state.pages_visited >= limits.max_pages:
            logger.info("Page limit of %d reached", limits.max_pages)
            state.finished = True
            break

        candidate = find_next_candidate(html, page_url)
        if candidate is None or not candidate.is_valid(limits.same_domain_only):
            logger.info("No more pages found after %s", page_url)
            state.finished = True
            break

        state.current_url = candidate.url
        if limits.delay_between_pages:
            await asyncio.sleep(limits.delay_between_pages)

    logger.info(
        "Scraped %d articles from %d page(s)",
        len(state.articles),
        state.pages_visited,
    )
    return state


async def scrape(
    url: str,
    config: CrawlConfig,
    fetch: Optional[Fetch] = None,
) -> List[ArticleRecord]:
    """Return every article found while crawling from ``url``."""
    state = await crawl_pages(url, config, fetch)
    return state.articles


async def run_scrape(
    job: ScrapeJob,
    config: CrawlConfig,
    storage: Optional[ArticleStorage] = None,
    fetch: Optional[Fetch] = None,
) -> ScrapeResult:
    """Scrape according to ``job`` and persist the articles if a storage is given."""
    max_pages = job.max_pages if job.use_pagination and job.max_pages > 1 else 1
    config = replace(config, pagination=replace(config.pagination, max_pages=max_pages))

    start = time.perf_counter()
    try:
        state = await crawl_pages(job.url, config, fetch)
    except FetchError as exc:
        logger.error("Scraping failed: %s", exc)
        return ScrapeResult(success=False, error=str(exc))

    result = ScrapeResult(
        success=True,
        articles=state.articles,
        pages_visited=state.pages_visited,
    )
    if not result.articles:
        logger.info("No articles found at %s", job.url)
        return result

    if storage is not None:
        if job.append:
            result.output_paths["json"] = storage.append_json(
                result.articles, job.filename or ACCUMULATED_FILENAME
            )
        else:
            result.output_paths.update(storage.save(result.articles, job.fmt, job.filename))

    logger.info(
        "Scraped %d article(s) from %s in %.2fs",
        result.count,
        job.url,
        time.perf_counter() - start,
    )
    return result
