import pytest

from news_scout import cli
from news_scout.models import ArticleRecord, ScrapeResult


def test_url_defaults_to_scrape_command():
    args = cli.parse_args(["https://a.com/news", "-p", "3", "-f", "both"])

    assert args.command == "scrape"
    job = cli.build_job(args)
    assert job.url == "https://a.com/news"
    assert job.max_pages == 3
    assert job.use_pagination
    assert job.fmt == "both"


def test_no_pagination_flag():
    args = cli.parse_args(["scrape", "https://a.com/news", "-p", "3", "--no-pagination"])

    assert not cli.build_job(args).use_pagination


def test_config_from_arguments(tmp_path):
    args = cli.parse_args(
        [
            "scrape",
            "https://a.com/news",
            "-p",
            "4",
            "--delay",
            "0.5",
            "--allow-cross-domain",
            "--output-dir",
            str(tmp_path),
        ]
    )
    config = cli.build_config(args)

    assert config.pagination.max_pages == 4
    assert config.pagination.delay_between_pages == 0.5
    assert not config.pagination.same_domain_only
    assert config.output_dir == tmp_path.resolve()


def test_schedule_arguments():
    args = cli.parse_args(["schedule", "https://a.com/news", "-i", "30m", "--append"])

    assert args.interval == "30m"
    assert cli.build_job(args).append


def test_examples_command(capsys):
    assert cli.main(["examples"]) == 0
    assert "news-scout scrape" in capsys.readouterr().out


def test_scrape_failure_exits_non_zero(monkeypatch, tmp_path):
    async def failing(job, config, storage=None, fetch=None):
        return ScrapeResult(success=False, error="boom")

    monkeypatch.setattr(cli, "run_scrape", failing)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["https://a.com/news", "--output-dir", str(tmp_path)])
    assert excinfo.value.code == 1


def test_scrape_prints_preview(monkeypatch, tmp_path, capsys):
    articles = [
        ArticleRecord(title=f"Story {i}", url=f"https://a.com/story/{i}") for i in range(5)
    ]

    async def succeeding(job, config, storage=None, fetch=None):
        return ScrapeResult(success=True, articles=articles, pages_visited=1)

    monkeypatch.setattr(cli, "run_scrape", succeeding)

    assert cli.main(["https://a.com/news", "--output-dir", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "1. Story 0" in out
    assert "... and 2 more" in out


def test_negative_delay_is_rejected(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["https://a.com/news", "--delay", "-1", "--output-dir", str(tmp_path)])
    assert excinfo.value.code == 2
