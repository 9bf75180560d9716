"""Keyword gap analysis between two keyword-score lists."""

import re
from typing import Sequence

from seotoolkit.constants import (
    DOMAIN_CONTENT_KEYWORDS,
    DOMAIN_KEYWORD_LIMIT,
    DOMAIN_META_KEYWORDS,
    META_KEYWORD_BOOST,
    OPPORTUNITY_HIGH_THRESHOLD,
    OPPORTUNITY_MEDIUM_THRESHOLD,
)
from seotoolkit.models import CommonKeyword, MissingKeyword, PageSignals, ScoredKeyword
from seotoolkit.scoring import round_half_up
from seotoolkit.text_metrics import extract_keywords


def opportunity_tier(score: float) -> str:
    """High above 0.7, Medium above 0.4, Low otherwise."""
    if score > OPPORTUNITY_HIGH_THRESHOLD:
        return 'High'
    if score > OPPORTUNITY_MEDIUM_THRESHOLD:
        return 'Medium'
    return 'Low'


def find_missing(
    set_a: Sequence[ScoredKeyword],
    set_b: Sequence[ScoredKeyword],
) -> list[MissingKeyword]:
    """Keywords in ``set_b`` that ``set_a`` lacks (case-insensitive).

    Args:
        set_a: Keywords you already have
        set_b: Keywords to compare against (e.g. a competitor's)

    Returns:
        Missing keywords in ``set_b`` order, tiered by their ``set_b`` score.
        A keyword repeated in ``set_b`` with different casing is reported once.
    """
    seen = {kw.keyword.lower() for kw in set_a}
    missing = []
    for kw in set_b:
        key = kw.keyword.lower()
        if key in seen:
            continue
        seen.add(key)
        missing.append(MissingKeyword(
            keyword=kw.keyword,
            score=kw.score,
            opportunity=opportunity_tier(kw.score),
        ))
    return missing


def find_common(
    set_a: Sequence[ScoredKeyword],
    set_b: Sequence[ScoredKeyword],
) -> list[CommonKeyword]:
    """Keywords present in both lists, sorted by descending ``set_b`` score."""
    b_scores: dict[str, float] = {}
    for kw in set_b:
        b_scores.setdefault(kw.keyword.lower(), kw.score)

    common = [
        CommonKeyword(
            keyword=kw.keyword,
            score_a=kw.score,
            score_b=b_scores[kw.keyword.lower()],
        )
        for kw in set_a
        if kw.keyword.lower() in b_scores
    ]
    common.sort(key=lambda kw: kw.score_b, reverse=True)
    return common


def normalize_domain(domain: str) -> str:
    """Strip scheme, ``www.`` and trailing slash from a domain."""
    domain = re.sub(r'^https?://', '', domain.strip(), flags=re.IGNORECASE)
    domain = re.sub(r'^www\.', '', domain, flags=re.IGNORECASE)
    return domain.rstrip('/')


def domain_keywords(signals: PageSignals) -> list[ScoredKeyword]:
    """Keyword profile of a page for gap analysis.

    Content keywords are merged with keywords from the title, meta
    description and H1/H2 headings; the latter add half their score to
    the content score, capped at 1.
    """
    scores: dict[str, float] = {
        kw.keyword: kw.score
        for kw in extract_keywords(signals.text_content, DOMAIN_CONTENT_KEYWORDS)
    }

    meta_text = ' '.join([signals.title, signals.meta_description, *signals.h1, *signals.h2])
    for kw in extract_keywords(meta_text, DOMAIN_META_KEYWORDS):
        boosted = scores.get(kw.keyword, 0.0) + kw.score * META_KEYWORD_BOOST
        scores[kw.keyword] = min(1.0, round_half_up(boosted, 2))

    merged = [ScoredKeyword(keyword=keyword, score=score) for keyword, score in scores.items()]
    merged.sort(key=lambda kw: kw.score, reverse=True)
    return merged[:DOMAIN_KEYWORD_LIMIT]


def summarize_gap(
    your_keywords: Sequence[ScoredKeyword],
    competitor_keywords: Sequence[ScoredKeyword],
    missing: Sequence[MissingKeyword],
    common: Sequence[CommonKeyword],
    your_unique: Sequence[MissingKeyword],
) -> dict:
    """Headline numbers for a keyword gap report."""
    if not your_keywords:
        gap_percentage = 100
    elif not competitor_keywords:
        gap_percentage = 0
    else:
        gap_percentage = round_half_up(len(missing) / len(competitor_keywords) * 100)

    return {
        'total_competitor_keywords': len(competitor_keywords),
        'total_your_keywords': len(your_keywords),
        'missing_keywords_count': len(missing),
        'common_keywords_count': len(common),
        'your_unique_count': len(your_unique),
        'gap_percentage': gap_percentage,
    }
