"""Composite SEO scoring from detected issues and positive signals."""

import math
from typing import Iterable, Optional

from seotoolkit.constants import (
    BONUS_H2_COUNT,
    BONUS_INTERNAL_LINKS,
    BONUS_WORD_COUNT,
    CATEGORY_SOCIAL,
    CATEGORY_SCORE_MAP,
    MAX_SCORE,
    MIN_SCORE,
    SCORE_BONUS,
    SCORE_WEIGHTS,
    SEVERITY_DEDUCTIONS,
    SOCIAL_DEDUCTION_FACTOR,
)
from seotoolkit.models import PageSignals, SEOIssue, SEOScore, Severity


def round_half_up(value: float, ndigits: Optional[int] = None):
    """Round to the nearest value with halves rounded up.

    Returns an int when ``ndigits`` is omitted, otherwise a float with
    ``ndigits`` decimal places. Unlike the built-in ``round``, 0.125
    rounds to 0.13 and 2.25 to 2.3.
    """
    if ndigits is None:
        return int(math.floor(value + 0.5))
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def issue_deduction(issue: SEOIssue) -> float:
    """Points an issue removes from its category's sub-score."""
    severity = Severity(issue.severity).value
    deduction = SEVERITY_DEDUCTIONS.get(severity, 0)
    if issue.category == CATEGORY_SOCIAL:
        deduction *= SOCIAL_DEDUCTION_FACTOR
    return deduction


def calculate_seo_score(signals: PageSignals, issues: Iterable[SEOIssue]) -> SEOScore:
    """Calculate the overall and per-category SEO score.

    Every sub-score starts at 100 and loses points per issue in its
    category (floored at 0), then gains fixed bonuses for good signals
    (capped at 100). The overall score is the weighted sum.

    Args:
        signals: Signals extracted from the page
        issues: Issues detected for the same page

    Returns:
        SEOScore with integer sub-scores
    """
    scores = {category: float(MAX_SCORE) for category in SCORE_WEIGHTS}

    for issue in issues:
        category = CATEGORY_SCORE_MAP.get(issue.category)
        if category is None:
            continue
        scores[category] = max(MIN_SCORE, scores[category] - issue_deduction(issue))

    bonuses = {
        'content': signals.word_count >= BONUS_WORD_COUNT,
        'technical': len(signals.schema_markup) > 0,
        'on_page': len(signals.h2) >= BONUS_H2_COUNT,
        'links': len(signals.internal_links) >= BONUS_INTERNAL_LINKS,
    }
    for category, earned in bonuses.items():
        if earned:
            scores[category] = min(MAX_SCORE, scores[category] + SCORE_BONUS)

    overall = sum(scores[category] * weight for category, weight in SCORE_WEIGHTS.items())

    return SEOScore(
        overall=round_half_up(overall),
        content=round_half_up(scores['content']),
        technical=round_half_up(scores['technical']),
        on_page=round_half_up(scores['on_page']),
        links=round_half_up(scores['links']),
    )
