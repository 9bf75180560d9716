"""Keyword placement, density and prominence analysis."""

import re

from seotoolkit.constants import PROMINENCE_WEIGHTS
from seotoolkit.models import KeywordAnalysis, PageSignals
from seotoolkit.scoring import round_half_up


def count_occurrences(keyword: str, text: str) -> int:
    """Count whole-word, case-insensitive occurrences of a keyword phrase."""
    if not keyword.strip():
        return 0
    pattern = re.compile(rf'\b{re.escape(keyword.lower())}\b', re.IGNORECASE)
    return len(pattern.findall(text.lower()))


def keyword_density(count: int, keyword: str, total_words: int) -> float:
    """Share of the content's words taken up by the keyword, as a percentage."""
    if total_words <= 0:
        return 0.0
    phrase_words = len(keyword.split())
    return round_half_up(count * phrase_words / total_words * 100, 2)


def analyze_keyword(keyword: str, signals: PageSignals, url: str) -> KeywordAnalysis:
    """Analyze how well a page targets a keyword.

    Args:
        keyword: Target keyword or phrase
        signals: Signals extracted from the page
        url: Page URL (checked for the hyphenated keyword)

    Returns:
        KeywordAnalysis with placement flags, density, count and prominence
    """
    keyword = keyword.strip()
    if not keyword:
        return KeywordAnalysis(keyword=keyword)

    keyword_lower = keyword.lower()

    count = count_occurrences(keyword, signals.text_content)
    density = keyword_density(count, keyword, len(signals.text_content.split()))

    placements = {
        'title': keyword_lower in signals.title.lower(),
        'meta_description': keyword_lower in signals.meta_description.lower(),
        'h1': any(keyword_lower in heading.lower() for heading in signals.h1),
        'h2': any(keyword_lower in heading.lower() for heading in signals.h2),
        'url': re.sub(r'\s+', '-', keyword_lower) in (url or '').lower(),
    }

    prominence = sum(
        PROMINENCE_WEIGHTS[placement]
        for placement, found in placements.items()
        if found
    )

    return KeywordAnalysis(
        keyword=keyword,
        in_title=placements['title'],
        in_meta_description=placements['meta_description'],
        in_h1=placements['h1'],
        in_h2=placements['h2'],
        in_url=placements['url'],
        density=density,
        count=count,
        prominence_score=prominence,
    )
