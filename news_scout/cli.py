"""Command-line entry point for news-scout."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .config import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_USER_AGENT,
    CrawlConfig,
    PaginationConfig,
    ScrapeConfig,
)
from .crawler import ScrapeJob, run_scrape
from .models import ScrapeResult
from .scheduler import JobRegistry, parse_interval
from .storage import OUTPUT_FORMATS, ArticleStorage, StorageError

logger = logging.getLogger("news_scout.cli")

PREVIEW_COUNT = 3

EXAMPLES = """\
Usage examples

  Scrape a news listing once:
    news-scout scrape https://example.com/news

  Follow pagination for up to 5 pages and save JSON and CSV:
    news-scout scrape https://example.com/news -p 5 -f both

  Scrape every hour and merge into one accumulated file:
    news-scout schedule https://example.com/news -i 1h --append

  Delete output files older than two weeks:
    news-scout clean --days 14
"""


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("scrape", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        type=Path,
        help="Directory where result files are written",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_scrape_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url", help="Website URL to scrape")
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output format",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output filename (generated from the current time when omitted)",
    )
    parser.add_argument(
        "-p",
        "--pages",
        type=int,
        default=1,
        help="Maximum number of pages to scrape when following pagination",
    )
    parser.add_argument(
        "--no-pagination",
        dest="pagination",
        action="store_false",
        help="Only scrape the given page, even if --pages is larger than 1",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Seconds to wait between page requests",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP timeout in seconds",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with every request",
    )
    parser.add_argument(
        "--allow-cross-domain",
        action="store_true",
        help="Follow pagination links that leave the starting host",
    )
    _add_common_arguments(parser)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="news-scout",
        description="Scrape news articles from arbitrary websites, following pagination.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape_parser = subparsers.add_parser("scrape", help="Scrape a website once")
    _add_scrape_arguments(scrape_parser)

    schedule_parser = subparsers.add_parser(
        "schedule", help="Scrape a website repeatedly at a fixed interval"
    )
    _add_scrape_arguments(schedule_parser)
    schedule_parser.add_argument(
        "-i",
        "--interval",
        default="1h",
        help="Interval between runs, e.g. 30s, 15m, 2h, 1d",
    )
    schedule_parser.add_argument(
        "--append",
        action="store_true",
        help="Merge results into one accumulated JSON file instead of new files",
    )

    clean_parser = subparsers.add_parser("clean", help="Delete old result files")
    clean_parser.add_argument(
        "--days",
        type=float,
        default=7,
        help="Delete files older than this many days",
    )
    _add_common_arguments(clean_parser)

    subparsers.add_parser("examples", help="Show usage examples")

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def build_config(args: argparse.Namespace) -> CrawlConfig:
    return CrawlConfig(
        scrape=ScrapeConfig(timeout=args.timeout, user_agent=args.user_agent),
        pagination=PaginationConfig(
            max_pages=max(args.pages, 1),
            delay_between_pages=args.delay,
            same_domain_only=not args.allow_cross_domain,
        ),
        output_dir=Path(args.output_dir).resolve(),
    )


def build_job(args: argparse.Namespace) -> ScrapeJob:
    return ScrapeJob(
        url=args.url,
        max_pages=max(args.pages, 1),
        use_pagination=args.pagination and args.pages > 1,
        fmt=args.fmt,
        filename=args.output,
        append=getattr(args, "append", False),
    )


def _print_preview(result: ScrapeResult) -> None:
    for index, article in enumerate(result.articles[:PREVIEW_COUNT], start=1):
        print(f"  {index}. {article.title}")
        print(f"     {article.url}")
    remaining = result.count - PREVIEW_COUNT
    if remaining > 0:
        print(f"  ... and {remaining} more")


def _run_scrape(args: argparse.Namespace) -> int:
    config = build_config(args)
    job = build_job(args)
    storage = ArticleStorage(config.output_dir)
    logger.info(
        "Scraping %s (format=%s, pages=%d, pagination=%s)",
        job.url,
        job.fmt,
        job.max_pages,
        "on" if job.use_pagination else "off",
    )
    try:
        result = asyncio.run(run_scrape(job, config, storage))
    except StorageError as exc:
        logger.error("%s", exc)
        return 1

    if not result.success:
        logger.error("Failed: %s", result.error)
        return 1

    if not result.count:
        logger.warning(
            "No articles found. The website structure might not match common patterns."
        )
        return 0

    logger.info("Scraped %d article(s) from %d page(s)", result.count, result.pages_visited)
    for fmt, path in result.output_paths.items():
        logger.info("Saved %s: %s", fmt.upper(), path)
    _print_preview(result)
    return 0


async def _schedule_forever(args: argparse.Namespace) -> None:
    config = build_config(args)
    registry = JobRegistry(config, ArticleStorage(config.output_dir))
    scheduled = registry.schedule(build_job(args), parse_interval(args.interval))
    logger.info("Job %s scheduled; press Ctrl+C to stop", scheduled.id)
    try:
        await registry.wait()
    finally:
        registry.cancel_all()


def _run_schedule(args: argparse.Namespace) -> int:
    parse_interval(args.interval)
    try:
        asyncio.run(_schedule_forever(args))
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")
    return 0


def _run_clean(args: argparse.Namespace) -> int:
    storage = ArticleStorage(Path(args.output_dir).resolve())
    deleted = storage.clean_old_files(args.days)
    logger.info("Deleted %d file(s) from %s", deleted, storage.output_dir)
    return 0


def main(argv: Sequence[str] | None = None) -> Optional[int]:
    args = parse_args(argv)
    if args.command == "examples":
        print(EXAMPLES)
        return 0

    _configure_logging(args.verbose)
    handlers = {
        "scrape": _run_scrape,
        "schedule": _run_schedule,
        "clean": _run_clean,
    }
    try:
        status = handlers[args.command](args)
    except ValueError as exc:
        logger.error("%s", exc)
        status = 2
    if status:
        sys.exit(status)
    return status


if __name__ == "__main__":
    main()
