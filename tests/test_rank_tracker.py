"""Tests for the search rank tracker."""

from unittest.mock import Mock, call, patch

import pytest
import requests

from seotoolkit.models import RankCheckResult
from seotoolkit.rank_tracker import (
    RankTracker,
    build_search_url,
    extract_domain,
    lookup_rank,
    parse_serp_results,
)


SERP_HTML = """
<html><body>
<a href="https://www.google.com/search?q=next">Next</a>
<div><a href="https://www.example.com/page"><h3>Example</h3></a></div>
<a href="/url?q=relative">Relative</a>
<div><a href="https://other.org/">Other</a></div>
<a href="https://www.example.com/page">Duplicate</a>
<a href="https://youtube.com/results?search_query=seo">Videos</a>
<a href="https://webcache.googleusercontent.com/search?q=cache">Cached</a>
<a href="https://blog.third.net/post">Third</a>
</body></html>
"""


@pytest.fixture
def rng():
    rng = Mock()
    rng.random.return_value = 0.5
    rng.choice.side_effect = lambda options: options[0]
    return rng


@pytest.fixture
def session():
    session = Mock()
    session.get.return_value = Mock(status_code=200, text=SERP_HTML)
    return session


@pytest.fixture
def tracker(session, rng):
    return RankTracker(session=session, sleep=Mock(), rng=rng, timeout=5)


class TestSearchUrl:
    """Test cases for search URL building."""

    def test_country_domain(self):
        """Test the country selects the search domain and gl parameter."""
        assert build_search_url("seo tools", "IN") == (
            "https://www.google.co.in/search?q=seo%20tools&num=100&hl=en&gl=in"
        )

    def test_city(self):
        """Test a city adds the near parameter."""
        url = build_search_url("cafe", "US", "New York")
        assert url == "https://www.google.com/search?q=cafe&num=100&hl=en&near=New%20York&gl=us"

    def test_unknown_country_falls_back(self):
        """Test unknown countries use the generic domain."""
        assert build_search_url("x", "ZZ").startswith("https://www.google.com/search?q=x")


class TestParseResults:
    """Test cases for result parsing."""

    def test_organic_links_in_order(self):
        """Test search-engine links, relatives and duplicates are dropped."""
        results = parse_serp_results(SERP_HTML)

        assert [r.url for r in results] == [
            "https://www.example.com/page",
            "https://other.org/",
            "https://blog.third.net/post",
        ]
        assert [r.position for r in results] == [1, 2, 3]
        assert [r.domain for r in results] == ["example.com", "other.org", "blog.third.net"]

    def test_capped_at_100(self):
        """Test at most 100 results are kept."""
        html = "".join(f'<a href="https://site{i}.com/">{i}</a>' for i in range(150))
        assert len(parse_serp_results(html)) == 100

    def test_empty_page(self):
        """Test an empty page has no results."""
        assert parse_serp_results("") == []

    def test_extract_domain(self):
        """Test www is stripped and unparseable input returned as is."""
        assert extract_domain("https://www.example.com/a") == "example.com"
        assert extract_domain("not a url") == "not a url"


class TestRankTracker:
    """Test cases for RankTracker."""

    def test_found(self, tracker, session):
        """Test the first matching result gives the position."""
        result = tracker.check_rank("seo tools", "www.example.com")

        assert result.position == 1
        assert result.url == "https://www.example.com/page"
        assert result.location == "IN"
        assert result.country == "IN"
        assert result.city is None
        assert len(result.top_results) == 3
        tracker.sleep.assert_called_once_with(3.5)
        _, kwargs = session.get.call_args
        assert kwargs["timeout"] == 5
        assert "User-Agent" in kwargs["headers"]

    def test_domain_match_is_substring(self, tracker):
        """Test a subdomain result matches its parent domain."""
        assert tracker.check_rank("seo", "third.net").position == 3

    def test_not_found(self, tracker):
        """Test an absent domain yields no position."""
        result = tracker.check_rank("seo", "missing.io", "US", "Austin")

        assert result.position is None
        assert result.url is None
        assert result.location == "Austin, US"
        assert result.country == "US"
        assert result.city == "Austin"

    def test_http_error_is_unknown(self, tracker, session):
        """Test blocked requests yield an unknown position."""
        session.get.return_value = Mock(status_code=429, text="")

        result = tracker.check_rank("seo", "example.com")

        assert result.position is None
        assert result.top_results == ()

    def test_network_error_is_unknown(self, tracker, session):
        """Test connection failures never raise."""
        session.get.side_effect = requests.exceptions.ConnectionError("blocked")
        assert tracker.check_rank("seo", "example.com").position is None

    def test_batch_check(self, tracker):
        """Test keywords are checked in order with pauses between them."""
        results = tracker.batch_check(["a", "b", "c"], "example.com")

        assert [r.keyword for r in results] == ["a", "b", "c"]
        assert tracker.sleep.call_args_list == [
            call(3.5), call(7.5), call(3.5), call(7.5), call(3.5),
        ]


class TestLookupRank:
    """Test cases for the narrow rank lookup."""

    def test_returns_position(self):
        """Test only the position is returned."""
        result = RankCheckResult("seo", "example.com", 7, "https://example.com", "IN")
        with patch.object(RankTracker, "check_rank", return_value=result) as check_rank:
            assert lookup_rank("seo", "example.com") == 7
        check_rank.assert_called_once()

    def test_unknown(self):
        """Test an unknown rank is None."""
        result = RankCheckResult("seo", "example.com", None, None, "IN")
        with patch.object(RankTracker, "check_rank", return_value=result):
            assert lookup_rank("seo", "example.com") is None
