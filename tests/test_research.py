"""Tests for keyword research and trend estimation."""

from unittest.mock import Mock

import httpx
import pytest

from seotoolkit.external.suggest import SuggestClient
from seotoolkit.models import TrendData
from seotoolkit.research import (
    KeywordResearcher,
    classify_opportunity,
    competition_level,
    estimate_difficulty,
    estimate_volume,
    estimate_volume_from_trend,
    generate_questions,
    merge_suggestions,
    normalize_interest,
    suggestion_queries,
    trend_from_suggestions,
)


@pytest.fixture
def rng():
    """Randomness source pinned to the midpoint."""
    rng = Mock()
    rng.random.return_value = 0.5
    return rng


def mock_client(handler) -> SuggestClient:
    return SuggestClient(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestSuggestClient:
    """Test cases for the autocomplete client."""

    def test_suggestions(self):
        """Test suggestions are read from the second array element."""
        def handler(request):
            assert request.url.params["client"] == "firefox"
            assert request.url.params["q"] == "coffee"
            return httpx.Response(200, json=["coffee", ["coffee shop", "coffee beans", 3]])

        assert mock_client(handler).suggestions("coffee") == ["coffee shop", "coffee beans"]

    @pytest.mark.parametrize("response", [
        httpx.Response(500),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"unexpected": "shape"}),
        httpx.Response(200, json=["coffee"]),
    ])
    def test_failures_return_empty(self, response):
        """Test errors and malformed payloads yield no suggestions."""
        assert mock_client(lambda request: response).suggestions("coffee") == []

    def test_transport_error_returns_empty(self):
        """Test connection failures yield no suggestions."""
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        assert mock_client(handler).suggestions("coffee") == []

    def test_bulk_preserves_order(self):
        """Test bulk results line up with their queries."""
        client = mock_client(
            lambda request: httpx.Response(200, json=["q", [request.url.params["q"] + " x"]])
        )
        assert client.bulk_suggestions(["a", "b", "c"]) == [["a x"], ["b x"], ["c x"]]
        assert client.bulk_suggestions([]) == []


class TestEstimators:
    """Test cases for the heuristic estimators."""

    def test_questions(self):
        """Test ten question templates are filled with the keyword."""
        questions = generate_questions("coffee")

        assert len(questions) == 10
        assert questions[0] == "What is coffee?"
        assert "coffee vs alternatives?" in questions

    def test_suggestion_queries(self):
        """Test the five seed queries."""
        assert suggestion_queries("tea") == ["tea", "tea a", "tea b", "tea for", "tea vs"]

    def test_merge_suggestions(self):
        """Test duplicates and the seed keyword are dropped."""
        batches = [["Coffee", "coffee shop"], ["coffee shop", "coffee beans"]]
        assert merge_suggestions("coffee", batches) == ["coffee shop", "coffee beans"]

    def test_merge_caps_at_thirty(self):
        """Test at most 30 suggestions are kept."""
        batches = [[f"tea {i}" for i in range(40)]]
        assert len(merge_suggestions("tea", batches)) == 30

    @pytest.mark.parametrize("keyword,suggestions,expected", [
        ("coffee", [], 85),
        ("espresso", [], 70),
        ("coffee beans", [], 60),
        ("best coffee grinder", [], 40),
        ("how to brew coffee at home", [], 25),
        ("coffee", ["s"] * 21, 90),
    ])
    def test_difficulty(self, keyword, suggestions, expected):
        """Test difficulty adjustments."""
        assert estimate_difficulty(keyword, suggestions) == expected

    def test_volume(self, rng):
        """Test volume scales with word count and suggestions."""
        assert estimate_volume("coffee", ["a"] * 4, rng) == 60000
        assert estimate_volume("coffee beans", [], rng) == 15000
        assert estimate_volume("how to brew great coffee", [], rng) == 1500

    @pytest.mark.parametrize("difficulty,volume,expected", [
        (20, 6000, "High"),
        (40, 3000, "Medium"),
        (75, 100000, "Low"),
        (55, 100, "Medium"),
    ])
    def test_opportunity(self, difficulty, volume, expected):
        """Test opportunity classification."""
        assert classify_opportunity(difficulty, volume) == expected

    def test_competition(self):
        """Test competition tiers."""
        assert competition_level(61) == "High"
        assert competition_level(60) == "Medium"
        assert competition_level(30) == "Low"


class TestTrends:
    """Test cases for interest estimation."""

    @pytest.mark.parametrize("count,interest,trend", [
        (0, 20, "declining"),
        (3, 56, "stable"),
        (6, 92, "rising"),
        (10, 100, "rising"),
    ])
    def test_trend_from_suggestions(self, count, interest, trend):
        """Test interest and direction from suggestion counts."""
        data = trend_from_suggestions("coffee", [f"s{i}" for i in range(count)])

        assert data.interest == interest
        assert data.trend == trend
        assert len(data.related_queries) == min(count, 8)

    def test_normalize_interest(self):
        """Test interest is rescaled to the maximum."""
        trends = [TrendData("a", 20, "declining"), TrendData("b", 40, "stable")]
        assert [t.interest for t in normalize_interest(trends)] == [50, 100]

    def test_normalize_zero_max(self):
        """Test all-zero interest is left untouched."""
        trends = [TrendData("a", 0, "declining")]
        assert normalize_interest(trends) == trends
        assert normalize_interest([]) == []

    @pytest.mark.parametrize("interest,keyword,expected", [
        (100, "coffee", 5000),
        (73, "coffee", 3700),
        (100, "coffee beans", 2000),
        (100, "fresh coffee beans", 1000),
        (10, "how to brew", 50),
        (1, "best coffee beans online", 10),
        (55, "cold brew coffee", 550),
    ])
    def test_volume_from_trend(self, interest, keyword, expected):
        """Test volume estimates and rounding ladder."""
        assert estimate_volume_from_trend(interest, keyword) == expected


class TestKeywordResearcher:
    """Test cases for KeywordResearcher."""

    def test_research(self, rng):
        """Test a full research result with pinned randomness."""
        client = Mock()
        client.bulk_suggestions.return_value = [
            ["coffee", "coffee shop", "coffee near me open now"],
            ["coffee shop", "coffee and tea"],
            [],
            ["Coffee"],
            ["coffee vs tea"],
        ]

        result = KeywordResearcher(client=client, rng=rng).research(" coffee ")

        client.bulk_suggestions.assert_called_once_with(
            ["coffee", "coffee a", "coffee b", "coffee for", "coffee vs"]
        )
        assert result.keyword == "coffee"
        assert result.suggestions == (
            "coffee shop", "coffee near me open now", "coffee and tea", "coffee vs tea",
        )
        assert result.long_tail_keywords == ("coffee near me open now", "coffee and tea", "coffee vs tea")
        assert result.related_terms == ("coffee shop",)
        assert len(result.questions) == 10
        assert result.difficulty == 85
        assert result.volume == 60000
        assert result.opportunity == "Low"
        assert result.competition == "High"
        assert result.estimated_cpc == "$3.00"
        assert result.trend == "Stable"

    def test_compare_keywords(self):
        """Test interest comparison across keywords."""
        client = Mock()
        client.bulk_suggestions.return_value = [["a", "b", "c"], ["a", "b", "c", "d", "e", "f"]]

        trends = KeywordResearcher(client=client).compare_keywords(["tea", "coffee"])

        assert [(t.keyword, t.interest) for t in trends] == [("tea", 61), ("coffee", 100)]

    def test_estimate_trend(self):
        """Test a single keyword trend."""
        client = Mock()
        client.suggestions.return_value = ["a", "b"]

        trend = KeywordResearcher(client=client).estimate_trend("tea")

        assert trend == TrendData("tea", 44, "declining", ("a", "b"))
