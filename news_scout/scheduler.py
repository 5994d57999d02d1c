"""Interval scheduling of repeated scrapes."""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .config import CrawlConfig
from .crawler import Fetch, ScrapeJob, run_scrape
from .storage import ArticleStorage
from .utils import is_valid_url

logger = logging.getLogger("news_scout")

INTERVAL_PATTERN = re.compile(r"^(\d+)([smhd])?$")
INTERVAL_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_interval(interval: Union[str, int, float]) -> float:
    """Convert ``30s``/``15m``/``2h``/``1d`` (or a bare number of seconds) to seconds."""
    if isinstance(interval, (int, float)):
        seconds = float(interval)
    else:
        match = INTERVAL_PATTERN.match(str(interval).strip())
        if not match:
            raise ValueError(
                f"Invalid interval {interval!r}. Use: 30s, 15m, 2h, 1d, or seconds"
            )
        seconds = float(int(match.group(1)) * INTERVAL_UNITS[match.group(2) or "s"])
    if seconds <= 0:
        raise ValueError(f"Interval must be positive (got {interval!r})")
    return seconds


@dataclass
class ScheduledJob:
    """A registered recurring scrape and the task that drives it."""

    id: str
    job: ScrapeJob
    interval: float
    created_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    next_run: Optional[dt.datetime] = None
    runs: int = 0
    task: Optional[asyncio.Task] = None

    @property
    def interval_minutes(self) -> float:
        return self.interval / 60

    def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()


class JobRegistry:
    """Owns the set of scheduled jobs for one process."""

    def __init__(
        self,
        config: CrawlConfig,
        storage: Optional[ArticleStorage] = None,
        fetch: Optional[Fetch] = None,
    ) -> None:
        self.config = config
        self.storage = storage if storage is not None else ArticleStorage(config.output_dir)
        self.fetch = fetch
        self._jobs: Dict[str, ScheduledJob] = {}

    async def _run_once(self, scheduled: ScheduledJob) -> None:
        logger.info("Running scheduled scraping task for %s", scheduled.job.url)
        try:
            result = await run_scrape(scheduled.job, self.config, self.storage, self.fetch)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Scheduled scraping failed for %s", scheduled.job.url)
            return
        finally:
            scheduled.runs += 1
        if result.success:
            logger.info("Scheduled scraping completed (%d articles)", result.count)
        else:
            logger.error("Scheduled scraping failed: %s", result.error)

    async def _loop(self, scheduled: ScheduledJob) -> None:
        while True:
            await self._run_once(scheduled)
            scheduled.next_run = dt.datetime.now(dt.timezone.utc) + dt.timedelta(
                seconds=scheduled.interval
            )
            await asyncio.sleep(scheduled.interval)

    def schedule(self, job: ScrapeJob, interval: Union[str, int, float]) -> ScheduledJob:
        """Register ``job`` to run now and then every ``interval``; needs a running loop."""
        if not is_valid_url(job.url):
            raise ValueError(f"Invalid URL provided: {job.url!r}")
        seconds = parse_interval(interval)
        scheduled = ScheduledJob(id=f"job-{uuid.uuid4().hex[:12]}", job=job, interval=seconds)
        scheduled.next_run = scheduled.created_at
        scheduled.task = asyncio.get_running_loop().create_task(self._loop(scheduled))
        self._jobs[scheduled.id] = scheduled
        logger.info(
            "Scheduled job %s for %s every %.1f minute(s)",
            scheduled.id,
            job.url,
            scheduled.interval_minutes,
        )
        return scheduled

    def get(self, job_id: str) -> Optional[ScheduledJob]:
        return self._jobs.get(job_id)

    def list_jobs(self) -> List[ScheduledJob]:
        return list(self._jobs.values())

    def cancel(self, job_id: str) -> bool:
        scheduled = self._jobs.pop(job_id, None)
        if scheduled is None:
            logger.warning("Job not found: %s", job_id)
            return False
        scheduled.cancel()
        logger.info("Cancelled job %s", job_id)
        return True

    def cancel_all(self) -> int:
        count = len(self._jobs)
        for scheduled in self._jobs.values():
            scheduled.cancel()
        self._jobs.clear()
        logger.info("Cancelled %d scheduled job(s)", count)
        return count

    async def wait(self) -> None:
        """Block until every scheduled job has finished or been cancelled."""
        tasks = [job.task for job in self._jobs.values() if job.task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
