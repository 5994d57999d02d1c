import pytest

from news_scout.config import PaginationConfig
from news_scout.models import ArticleRecord, CrawlState
from news_scout.utils import clean_text, is_valid_url, resolve_url


def test_crawl_state_adds_only_unseen_urls():
    state = CrawlState(current_url="https://a.com/news")
    first = [ArticleRecord(title="A", url="https://a.com/1"), ArticleRecord(title="B", url="https://a.com/2")]
    second = [ArticleRecord(title="B again", url="https://a.com/2"), ArticleRecord(title="C", url="https://a.com/3")]

    assert state.add_articles(first) == 2
    assert state.add_articles(second) == 1
    assert [a.title for a in state.articles] == ["A", "B", "C"]


def test_article_dict_uses_camel_case_timestamp():
    article = ArticleRecord(title="A", url="https://a.com/1", scraped_at="2024-01-01T00:00:00.000Z")

    assert article.to_dict()["scrapedAt"] == "2024-01-01T00:00:00.000Z"
    assert ArticleRecord.from_dict(article.to_dict()) == article


@pytest.mark.parametrize(
    ("kwargs"),
    [{"max_pages": 0}, {"delay_between_pages": -0.1}],
)
def test_pagination_config_validation(kwargs):
    with pytest.raises(ValueError):
        PaginationConfig(**kwargs)


def test_clean_text():
    assert clean_text("  Breaking\n\n  news \t today ") == "Breaking news today"
    assert clean_text(None) == ""


def test_url_helpers():
    assert is_valid_url("https://a.com/x")
    assert not is_valid_url("mailto:desk@a.com")
    assert not is_valid_url("/relative")
    assert resolve_url("../x", "https://a.com/a/b/") == "https://a.com/a/x"
    assert resolve_url("   ", "https://a.com/") is None
    assert resolve_url("http://[broken", "https://a.com/") is None
