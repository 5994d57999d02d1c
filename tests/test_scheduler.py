import asyncio

import pytest

from news_scout.config import CrawlConfig, PaginationConfig
from news_scout.crawler import ScrapeJob
from news_scout.fetcher import FetchError
from news_scout.scheduler import JobRegistry, parse_interval

PAGE = '<article><h2>Scheduled</h2><a href="/story/1">x</a></article>'


@pytest.mark.parametrize(
    ("raw", "seconds"),
    [("30s", 30), ("15m", 900), ("2h", 7200), ("1d", 86400), ("45", 45), (90, 90)],
)
def test_parse_interval(raw, seconds):
    assert parse_interval(raw) == seconds


@pytest.mark.parametrize("raw", ["", "1w", "h", "-5m", "0s"])
def test_parse_interval_rejects_bad_input(raw):
    with pytest.raises(ValueError):
        parse_interval(raw)


def make_registry(tmp_path, fetch):
    config = CrawlConfig(
        pagination=PaginationConfig(delay_between_pages=0),
        output_dir=tmp_path,
    )
    return JobRegistry(config, fetch=fetch)


def test_schedule_runs_immediately_and_can_be_cancelled(tmp_path):
    calls = []

    def fetch(url):
        calls.append(url)
        return PAGE

    async def scenario():
        registry = make_registry(tmp_path, fetch)
        scheduled = registry.schedule(ScrapeJob(url="https://a.com/news"), "1h")
        assert registry.list_jobs() == [scheduled]
        assert registry.get(scheduled.id) is scheduled
        for _ in range(100):
            if scheduled.runs:
                break
            await asyncio.sleep(0.01)
        assert registry.cancel(scheduled.id)
        await asyncio.gather(scheduled.task, return_exceptions=True)
        return registry, scheduled

    registry, scheduled = asyncio.run(scenario())

    assert scheduled.runs == 1
    assert scheduled.interval_minutes == 60
    assert scheduled.task.cancelled()
    assert calls == ["https://a.com/news"]
    assert registry.list_jobs() == []
    assert registry.get(scheduled.id) is None
    assert list(tmp_path.glob("news-*.json"))


def test_failing_job_keeps_running(tmp_path):
    def fetch(url):
        raise FetchError(url, "timed out")

    async def scenario():
        registry = make_registry(tmp_path, fetch)
        scheduled = registry.schedule(ScrapeJob(url="https://a.com/news"), 1)
        for _ in range(300):
            if scheduled.runs >= 2:
                break
            await asyncio.sleep(0.01)
        assert not scheduled.task.done()
        assert registry.cancel_all() == 1
        await asyncio.gather(scheduled.task, return_exceptions=True)
        return scheduled

    scheduled = asyncio.run(scenario())

    assert scheduled.runs >= 2


def test_schedule_rejects_invalid_url(tmp_path):
    registry = make_registry(tmp_path, lambda url: PAGE)

    with pytest.raises(ValueError):
        registry.schedule(ScrapeJob(url="ftp://a.com/news"), "1h")


def test_cancel_unknown_job(tmp_path):
    registry = make_registry(tmp_path, lambda url: PAGE)

    assert not registry.cancel("job-missing")
    assert registry.get("job-missing") is None
