"""MCP server exposing a news-scout scrape tool."""

from __future__ import annotations

import json
import logging
from typing import Sequence

from mcp.server.fastmcp import FastMCP

from .config import CrawlConfig, PaginationConfig
from .crawler import ScrapeJob, run_scrape
from .models import ArticleRecord
from .storage import articles_document

logger = logging.getLogger("news_scout.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="news-scout")


def render_result(articles: Sequence[ArticleRecord]) -> str:
    """Serialise articles in the same shape as the JSON output files."""
    return json.dumps(articles_document(articles), indent=2, ensure_ascii=False)


@mcp.tool()
async def scrape(
    url: str,
    max_pages: int = 1,
) -> str:
    """Scrape news articles from a listing page, following up to ``max_pages`` pages."""

    max_pages = max(max_pages, 1)
    config = CrawlConfig(pagination=PaginationConfig(max_pages=max_pages))
    job = ScrapeJob(url=url, max_pages=max_pages, use_pagination=max_pages > 1)
    result = await run_scrape(job, config)
    if not result.success:
        raise RuntimeError(result.error or f"Failed to scrape {url}")
    return render_result(result.articles)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
