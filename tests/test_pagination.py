import pytest

from news_scout.models import PaginationCandidate
from news_scout.pagination import (
    build_next_page_url,
    extract_page_number,
    find_next_candidate,
    find_next_page,
    is_valid_next,
)


def test_explicit_next_link_is_resolved():
    html = '<div><a class="next" href="?page=2">Next</a></div>'

    assert find_next_page(html, "https://a.com/list") == "https://a.com/list?page=2"


def test_rel_next_link():
    html = '<nav><a rel="next" href="/list/page/4">Older</a></nav>'

    assert find_next_page(html, "https://a.com/list/page/3") == "https://a.com/list/page/4"


def test_javascript_links_are_ignored():
    html = """
    <a class="next" href="javascript:void(0)">Next</a>
    <div class="pagination"><a href="/list?page=2">2</a></div>
    """

    assert find_next_page(html, "https://a.com/list") == "https://a.com/list?page=2"


def test_numbered_links_pick_nearest_higher_page():
    html = """
    <div class="pagination">
      <a href="/list?page=1">1</a>
      <a href="/list?page=5">5</a>
      <a href="/list?page=3">3</a>
      <a href="/list?page=99">Last</a>
    </div>
    """

    assert find_next_page(html, "https://a.com/list") == "https://a.com/list?page=3"


def test_numbered_links_respect_current_page():
    html = """
    <ul class="paging-widget">
      <li><a href="/list?page=2">2</a></li>
      <li><a href="/list?page=3">3</a></li>
      <li><a href="/list?page=4">4</a></li>
      <li><a href="/list?page=5">5</a></li>
    </ul>
    """

    assert find_next_page(html, "https://a.com/list?page=3") == "https://a.com/list?page=4"


def test_numbered_links_jump_when_next_number_missing():
    html = """
    <div class="pagination">
      <a href="/p/1">1</a><a href="/p/5">5</a><a href="/p/10">10</a>
    </div>
    """

    assert find_next_page(html, "https://a.com/p/1") == "https://a.com/p/5"


@pytest.mark.parametrize(
    ("current", "expected"),
    [
        ("https://a.com/news/page/2", "https://a.com/news/page/3"),
        ("https://a.com/list?page=2", "https://a.com/list?page=3"),
        ("https://a.com/list?cat=1&page=2", "https://a.com/list?cat=1&page=3"),
        ("https://a.com/p/4", "https://a.com/p/5"),
        ("https://a.com/news/", "https://a.com/news/page/2"),
        ("https://a.com/news?sort=new", "https://a.com/news/page/2?sort=new"),
    ],
)
def test_url_pattern_synthesis(current, expected):
    assert find_next_page("<html><body>nothing</body></html>", current) == expected


def test_build_next_page_url_only_returns_changed_urls():
    assert build_next_page_url("https://a.com/page/1", 1) != "https://a.com/page/1"


@pytest.mark.parametrize(
    ("url", "number"),
    [
        ("https://a.com/news/page/7", 7),
        ("https://a.com/news?page=3", 3),
        ("https://a.com/news?x=1&page=12", 12),
        ("https://a.com/p/9", 9),
        ("https://a.com/news", 1),
    ],
)
def test_extract_page_number(url, number):
    assert extract_page_number(url) == number


def test_candidate_carries_source_url():
    candidate = find_next_candidate('<a class="next" href="/n/page/2">n</a>', "https://a.com/n")

    assert candidate == PaginationCandidate(url="https://a.com/n/page/2", source_url="https://a.com/n")
    assert candidate.is_valid()


def test_validation_rejects_identity_and_cross_domain():
    assert not is_valid_next("https://a.com/p/1", "https://a.com/p/1", True)
    assert not is_valid_next("https://a.com/p/1", "https://b.com/p/2", True)


def test_validation_allows_cross_domain_when_disabled():
    assert is_valid_next("https://a.com/news", "https://b.com/news/page/2", False)


def test_validation_accepts_listing_continuations():
    assert is_valid_next("https://a.com/news", "https://a.com/news/page/2")
    assert is_valid_next("https://a.com/news/page/2", "https://a.com/news/page/3")
    assert is_valid_next("https://a.com/news", "https://a.com/archive?page=2")
    assert is_valid_next("https://a.com/news", "https://a.com/older-pages")


def test_validation_rejects_unrelated_paths():
    assert not is_valid_next("https://a.com/news/page/2", "https://a.com/sports/scores")
    assert not is_valid_next("https://a.com/news", "https://a.com/about")
