"""Keyword research - suggestions, questions and heuristic estimates.

Difficulty, volume, CPC and trend figures are estimates derived from the
shape of the keyword and the number of autocomplete suggestions. They are
not sourced from real search data. All randomness goes through an
injectable ``random.Random`` so results can be pinned in tests.
"""

import logging
import random
import re
from typing import Optional, Sequence

from seotoolkit.constants import (
    DIFFICULTY_MODIFIERS,
    LONG_TAIL_MIN_WORDS,
    MAX_SUGGESTIONS,
    QUESTION_PREFIX_PATTERN,
    QUESTION_TEMPLATES,
    SUGGESTION_QUERY_COUNT,
    TREND_RELATED_QUERIES,
)
from seotoolkit.external.suggest import SuggestClient
from seotoolkit.models import KeywordResearchResult, TrendData
from seotoolkit.scoring import round_half_up

logger = logging.getLogger(__name__)

_QUESTION_RE = re.compile(QUESTION_PREFIX_PATTERN, re.IGNORECASE)


def _word_count(keyword: str) -> int:
    return len(keyword.split())


def generate_questions(keyword: str) -> list[str]:
    """People-also-ask style questions for a keyword."""
    return [template.format(keyword=keyword) for template in QUESTION_TEMPLATES]


def suggestion_queries(keyword: str) -> list[str]:
    """Seed queries used to widen autocomplete coverage."""
    queries = [
        keyword,
        f"{keyword} a",
        f"{keyword} b",
        f"{keyword} for",
        f"{keyword} vs",
        f"how to {keyword}",
        f"best {keyword}",
        f"{keyword} tips",
    ]
    return queries[:SUGGESTION_QUERY_COUNT]


def merge_suggestions(keyword: str, batches: Sequence[Sequence[str]]) -> list[str]:
    """Flatten suggestion batches, dropping duplicates and the seed itself."""
    seen = set()
    merged = []
    for batch in batches:
        for suggestion in batch:
            if suggestion in seen or suggestion.lower() == keyword.lower():
                continue
            seen.add(suggestion)
            merged.append(suggestion)
    return merged[:MAX_SUGGESTIONS]


def estimate_difficulty(keyword: str, suggestions: Sequence[str]) -> int:
    """Estimate ranking difficulty (1-100) from keyword shape."""
    difficulty = 50
    words = _word_count(keyword)

    # Longer keywords tend to be less competitive
    if words == 1:
        difficulty += 20
    elif words == 2:
        difficulty += 10
    elif words >= 4:
        difficulty -= 15

    # Brand-like single words are usually harder
    if words == 1 and len(keyword) <= 6:
        difficulty += 15

    if _QUESTION_RE.search(keyword):
        difficulty -= 10

    if any(modifier in keyword.lower() for modifier in DIFFICULTY_MODIFIERS):
        difficulty -= 10

    if len(suggestions) > 20:
        difficulty += 5

    return max(1, min(100, difficulty))


def estimate_volume(
    keyword: str,
    suggestions: Sequence[str],
    rng: Optional[random.Random] = None,
) -> int:
    """Estimate monthly search volume from keyword shape and popularity."""
    rng = rng or random.Random()
    volume = 5000.0

    words = _word_count(keyword)
    if words == 1:
        volume *= 10
    elif words == 2:
        volume *= 3
    elif words >= 4:
        volume *= 0.3

    volume *= 1 + len(suggestions) * 0.05
    volume *= 0.5 + rng.random()

    return round_half_up(volume)


def classify_opportunity(difficulty: int, volume: int) -> str:
    if difficulty < 30 and volume > 5000:
        return 'High'
    if difficulty < 50 and volume > 2000:
        return 'Medium'
    if difficulty >= 70:
        return 'Low'
    return 'Medium'


def competition_level(difficulty: int) -> str:
    if difficulty > 60:
        return 'High'
    if difficulty > 30:
        return 'Medium'
    return 'Low'


def trend_from_suggestions(keyword: str, suggestions: Sequence[str]) -> TrendData:
    """Estimate relative interest from how many suggestions a keyword has."""
    count = len(suggestions)
    if count > 5:
        trend = 'rising'
    elif count > 2:
        trend = 'stable'
    else:
        trend = 'declining'

    return TrendData(
        keyword=keyword,
        interest=min(100, count * 12 + 20),
        trend=trend,
        related_queries=tuple(suggestions[:TREND_RELATED_QUERIES]),
    )


def normalize_interest(trends: Sequence[TrendData]) -> list[TrendData]:
    """Rescale interest so the most popular keyword scores 100."""
    max_interest = max((t.interest for t in trends), default=0)
    if max_interest <= 0:
        return list(trends)
    return [
        TrendData(
            keyword=t.keyword,
            interest=round_half_up(t.interest / max_interest * 100),
            trend=t.trend,
            related_queries=t.related_queries,
        )
        for t in trends
    ]


def estimate_volume_from_trend(interest: int, keyword: str) -> int:
    """Rough search volume from a 0-100 interest figure."""
    words = _word_count(keyword)

    if words >= 4:
        base = 200
    elif _QUESTION_RE.search(keyword):
        base = 500
    elif words == 1:
        base = 5000
    elif words == 2:
        base = 2000
    else:
        base = 1000

    volume = round_half_up(interest / 100 * base)

    # Round to realistic numbers
    if volume > 10000:
        return round_half_up(volume / 1000) * 1000
    if volume > 1000:
        return round_half_up(volume / 100) * 100
    if volume > 100:
        return round_half_up(volume / 10) * 10
    return max(10, volume)


class KeywordResearcher:
    """Builds keyword research reports from autocomplete data."""

    def __init__(
        self,
        client: Optional[SuggestClient] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the researcher.

        Args:
            client: Suggestion client (a default one is created when omitted)
            rng: Randomness source for volume/CPC/trend jitter
        """
        self.client = client or SuggestClient()
        self.rng = rng or random.Random()

    def research(self, keyword: str) -> KeywordResearchResult:
        """Research a seed keyword.

        Args:
            keyword: Seed keyword

        Returns:
            KeywordResearchResult with suggestions and heuristic estimates
        """
        keyword = keyword.strip()
        batches = self.client.bulk_suggestions(suggestion_queries(keyword))
        suggestions = merge_suggestions(keyword, batches)
        logger.info(f"Collected {len(suggestions)} suggestions for {keyword!r}")

        difficulty = estimate_difficulty(keyword, suggestions)
        volume = estimate_volume(keyword, suggestions, self.rng)

        return KeywordResearchResult(
            keyword=keyword,
            suggestions=tuple(suggestions),
            long_tail_keywords=tuple(s for s in suggestions if _word_count(s) >= LONG_TAIL_MIN_WORDS),
            related_terms=tuple(s for s in suggestions if _word_count(s) < LONG_TAIL_MIN_WORDS),
            questions=tuple(generate_questions(keyword)),
            difficulty=difficulty,
            volume=volume,
            opportunity=classify_opportunity(difficulty, volume),
            estimated_cpc=f"${self.rng.random() * 5 + 0.5:.2f}",
            competition=competition_level(difficulty),
            trend='Rising' if self.rng.random() > 0.5 else 'Stable',
        )

    def estimate_trend(self, keyword: str) -> TrendData:
        """Estimate interest for a single keyword."""
        return trend_from_suggestions(keyword, self.client.suggestions(keyword))

    def compare_keywords(self, keywords: Sequence[str]) -> list[TrendData]:
        """Estimate and normalize interest across several keywords."""
        batches = self.client.bulk_suggestions(list(keywords))
        trends = [
            trend_from_suggestions(keyword, suggestions)
            for keyword, suggestions in zip(keywords, batches)
        ]
        return normalize_interest(trends)


def estimate_trend(keyword: str, client: Optional[SuggestClient] = None) -> TrendData:
    """Estimate interest for a keyword with a default researcher."""
    return KeywordResearcher(client=client).estimate_trend(keyword)


def compare_keywords(
    keywords: Sequence[str], client: Optional[SuggestClient] = None
) -> list[TrendData]:
    """Compare relative interest across keywords with a default researcher."""
    return KeywordResearcher(client=client).compare_keywords(keywords)
