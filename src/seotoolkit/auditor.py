"""Request handlers tying fetching, extraction and analysis together."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from seotoolkit.config import AnalysisThresholds, default_thresholds
from seotoolkit.constants import (
    AUDIT_TOP_KEYWORDS,
    DEFAULT_TOP_KEYWORDS,
    MAX_SCORE,
    MIN_SCORE,
    ON_PAGE_LONG_CONTENT_WORDS,
    ON_PAGE_THIN_CONTENT_WORDS,
    ON_PAGE_WEIGHTS,
    PAGE_SPEED_MS_PER_POINT,
    RELATED_KEYWORD_SUGGESTIONS,
    RELATED_KEYWORDS_REPORTED,
)
from seotoolkit.database import AbstractStore
from seotoolkit.fetcher import PageFetcher, PageFetchError
from seotoolkit.issues import IssueAnalyzer
from seotoolkit.keyword_analyzer import analyze_keyword
from seotoolkit.keyword_gap import (
    domain_keywords,
    find_common,
    find_missing,
    normalize_domain,
    summarize_gap,
)
from seotoolkit.models import (
    AuditReport,
    KeywordAnalysis,
    KeywordGapReport,
    OnPageReport,
    PageSignals,
    ReadabilityMetrics,
    ScoredKeyword,
)
from seotoolkit.parser import extract
from seotoolkit.scoring import calculate_seo_score, round_half_up
from seotoolkit.text_metrics import calculate_readability, extract_keywords

logger = logging.getLogger(__name__)


class KeywordGapError(Exception):
    """Raised when the competitor domain yields no keywords to compare."""


def page_speed_score(load_time_ms: int) -> int:
    """Simple 0-100 speed score: one point lost per 50ms of load time."""
    score = round_half_up(MAX_SCORE - load_time_ms / PAGE_SPEED_MS_PER_POINT)
    return max(MIN_SCORE, min(MAX_SCORE, score))


def on_page_score(analysis: KeywordAnalysis, word_count: int, thresholds: AnalysisThresholds) -> int:
    """Keyword placement plus content health, 0-100."""
    score = 0
    for placement, present in (
        ('title', analysis.in_title),
        ('meta_description', analysis.in_meta_description),
        ('h1', analysis.in_h1),
        ('h2', analysis.in_h2),
        ('url', analysis.in_url),
    ):
        if present:
            score += ON_PAGE_WEIGHTS[placement]

    if thresholds.keyword_density_min <= analysis.density <= thresholds.keyword_density_max:
        score += ON_PAGE_WEIGHTS['density_ok']
    else:
        score += ON_PAGE_WEIGHTS['density_off']

    if word_count >= ON_PAGE_LONG_CONTENT_WORDS:
        score += ON_PAGE_WEIGHTS['long_content']
    elif word_count >= thresholds.thin_content_words:
        score += ON_PAGE_WEIGHTS['medium_content']

    return score


def on_page_suggestions(
    keyword: str,
    analysis: KeywordAnalysis,
    signals: PageSignals,
    readability: ReadabilityMetrics,
    related_keywords: list[str],
    thresholds: AnalysisThresholds,
) -> list[str]:
    """Actionable optimization suggestions for a keyword on a page."""
    suggestions = []

    if not analysis.in_title:
        suggestions.append(f'Add "{keyword}" to your title tag for better relevance signals.')
    if not analysis.in_meta_description:
        suggestions.append(f'Include "{keyword}" in your meta description to improve click-through rates.')
    if not analysis.in_h1:
        suggestions.append(f'Add "{keyword}" to your H1 heading to establish topic relevance.')
    if not analysis.in_h2:
        suggestions.append(f'Consider using "{keyword}" in at least one H2 subheading.')
    if not analysis.in_url:
        slug = '-'.join(keyword.split())
        suggestions.append(f'If possible, include "{slug}" in the URL slug.')

    if analysis.density < thresholds.keyword_density_min:
        suggestions.append(
            f'Keyword density is low ({analysis.density:g}%). Consider adding more mentions naturally.'
        )
    elif analysis.density > thresholds.keyword_density_max:
        suggestions.append(
            f'Keyword density might be too high ({analysis.density:g}%). Avoid over-optimization.'
        )

    if signals.word_count < ON_PAGE_THIN_CONTENT_WORDS:
        suggestions.append(
            f'Content is thin ({signals.word_count} words). Consider expanding to at least 800-1000 words.'
        )

    if readability.flesch_reading_ease < thresholds.min_readability_score:
        suggestions.append(
            f'Content may be difficult to read (score: {readability.flesch_reading_ease:g}). '
            'Simplify sentences.'
        )

    if len(signals.h2) < thresholds.min_h2_headings:
        suggestions.append('Add more H2 subheadings to improve content structure and scanability.')

    if signals.images_without_alt:
        suggestions.append(
            f'{len(signals.images_without_alt)} images are missing alt text. '
            'Add keyword-relevant alt descriptions.'
        )

    if len(signals.internal_links) < thresholds.min_internal_links:
        suggestions.append('Add more internal links to related content on your site.')

    if related_keywords:
        suggestions.append(f'Consider incorporating related terms: {", ".join(related_keywords)}.')

    return suggestions


class SEOAuditor:
    """Runs audits, on-page checks and keyword gap analyses."""

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        store: Optional[AbstractStore] = None,
        thresholds: Optional[AnalysisThresholds] = None,
    ):
        """Initialize the auditor.

        Args:
            fetcher: Page fetcher (a default one is created when omitted)
            store: Optional store; when set every report is persisted
            thresholds: Issue and suggestion thresholds
        """
        self.fetcher = fetcher or PageFetcher()
        self.store = store
        self.thresholds = thresholds or default_thresholds
        self.issue_analyzer = IssueAnalyzer(self.thresholds)

    def _save(self, table: str, record: dict) -> None:
        if self.store is None:
            return
        record_id = self.store.insert(table, record)
        logger.debug(f"Persisted {table} record {record_id}")

    def audit(self, url: str) -> AuditReport:
        """Full single-page audit.

        Raises:
            PageFetchError: If the page cannot be fetched or returns >= 400
        """
        page = self.fetcher.fetch_for_analysis(url)
        signals = extract(page.html, page.url)
        issues = self.issue_analyzer.analyze(signals, page.url)

        report = AuditReport(
            url=page.url,
            signals=signals,
            issues=tuple(issues),
            score=calculate_seo_score(signals, issues),
            readability=calculate_readability(signals.text_content),
            top_keywords=tuple(extract_keywords(signals.text_content, AUDIT_TOP_KEYWORDS)),
            ssl_enabled=page.url.lower().startswith('https://'),
            load_time_ms=page.load_time_ms,
            status_code=page.status_code,
            page_speed=page_speed_score(page.load_time_ms),
        )
        logger.info(f"Audited {page.url}: score {report.score.overall}, {len(issues)} issues")

        summary = report.summary()
        self._save('seo_audits', {
            'url': page.url,
            'title': signals.title,
            'meta_description': signals.meta_description,
            'og_tags': summary['og_tags'],
            'twitter_tags': summary['twitter_tags'],
            'headings': signals.heading_structure,
            'images_without_alt': len(signals.images_without_alt),
            'internal_links': len(signals.internal_links),
            'external_links': len(signals.external_links),
            'page_speed': report.page_speed,
            'mobile_friendly': signals.has_viewport,
            'schema_markup': list(signals.schema_markup),
            'ssl_enabled': report.ssl_enabled,
            'overall_score': report.score.overall,
        })
        return report

    def check_on_page(self, url: str, keyword: str) -> OnPageReport:
        """Keyword-focused on-page optimization check.

        Raises:
            PageFetchError: If the page cannot be fetched or returns >= 400
        """
        page = self.fetcher.fetch_for_analysis(url)
        signals = extract(page.html, page.url)

        analysis = analyze_keyword(keyword, signals, page.url)
        readability = calculate_readability(signals.text_content)
        content_keywords = extract_keywords(signals.text_content, DEFAULT_TOP_KEYWORDS)

        related = [
            kw.keyword for kw in content_keywords
            if kw.keyword not in keyword.lower()
        ][:RELATED_KEYWORD_SUGGESTIONS]

        suggestions = on_page_suggestions(
            keyword, analysis, signals, readability, related, self.thresholds
        )

        report = OnPageReport(
            url=page.url,
            keyword=keyword,
            analysis=analysis,
            readability=readability,
            word_count=signals.word_count,
            suggestions=tuple(suggestions),
            related_keywords=tuple(content_keywords[:RELATED_KEYWORDS_REPORTED]),
            seo_score=on_page_score(analysis, signals.word_count, self.thresholds),
        )
        logger.info(f"On-page check for {keyword!r} on {page.url}: score {report.seo_score}")

        self._save('on_page_seo', {
            'url': page.url,
            'keyword': keyword,
            'title_contains_keyword': analysis.in_title,
            'meta_contains_keyword': analysis.in_meta_description,
            'headings_contain_keyword': analysis.in_h1 or analysis.in_h2,
            'keyword_density': analysis.density,
            'content_length': signals.word_count,
            'readability_score': round_half_up(readability.flesch_reading_ease),
            'optimization_suggestions': suggestions,
        })
        return report

    def _domain_keywords(self, domain: str) -> list[ScoredKeyword]:
        """Keyword profile of a domain's homepage; [] when it cannot be fetched."""
        url = f"https://{normalize_domain(domain)}"
        try:
            page = self.fetcher.fetch_for_analysis(url)
        except PageFetchError as e:
            logger.warning(f"Skipping keywords for {domain}: {e}")
            return []
        return domain_keywords(extract(page.html, url))

    def keyword_gap(self, your_domain: str, competitor_domain: str) -> KeywordGapReport:
        """Compare the keyword profiles of two domains.

        Raises:
            KeywordGapError: If the competitor domain yields no keywords
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            yours_future = executor.submit(self._domain_keywords, your_domain)
            competitor_future = executor.submit(self._domain_keywords, competitor_domain)
            your_keywords = yours_future.result()
            competitor_keywords = competitor_future.result()

        if not competitor_keywords:
            raise KeywordGapError(
                f"Could not analyze competitor domain: {competitor_domain}. "
                "Make sure the URL is accessible."
            )

        missing = find_missing(your_keywords, competitor_keywords)
        common = find_common(your_keywords, competitor_keywords)
        your_unique = find_missing(competitor_keywords, your_keywords)

        report = KeywordGapReport(
            your_domain=your_domain,
            competitor_domain=competitor_domain,
            your_keywords=tuple(your_keywords),
            competitor_keywords=tuple(competitor_keywords),
            missing=tuple(missing),
            common=tuple(common),
            your_unique=tuple(your_unique),
            summary=summarize_gap(your_keywords, competitor_keywords, missing, common, your_unique),
        )
        logger.info(
            f"Keyword gap {your_domain} vs {competitor_domain}: "
            f"{len(missing)} missing, {len(common)} common"
        )

        self._save('keyword_gap_analysis', {
            'your_domain': your_domain,
            'competitor_domain': competitor_domain,
            'competitor_keywords': [kw.keyword for kw in competitor_keywords],
            'missing_keywords': [kw.keyword for kw in missing],
        })
        return report
