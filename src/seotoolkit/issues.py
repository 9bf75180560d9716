"""Rule-based SEO issue detection for a single page."""

from typing import Callable, List, Optional

from seotoolkit.config import AnalysisThresholds, default_thresholds
from seotoolkit.constants import (
    CATEGORY_CONTENT,
    CATEGORY_HEADINGS,
    CATEGORY_IMAGES,
    CATEGORY_LINKS,
    CATEGORY_META_TAGS,
    CATEGORY_SOCIAL,
    CATEGORY_TECHNICAL,
)
from seotoolkit.models import PageSignals, SEOIssue, Severity


class IssueAnalyzer:
    """Runs a fixed sequence of independent checks over page signals.

    Each check looks at the signals alone, never at another check's
    result, so the output order is always the check order below.
    """

    def __init__(self, thresholds: Optional[AnalysisThresholds] = None):
        """Initialize the analyzer.

        Args:
            thresholds: Detection thresholds (defaults from config)
        """
        self.thresholds = thresholds or default_thresholds

    @property
    def checks(self) -> List[Callable[[PageSignals, str], Optional[SEOIssue]]]:
        return [
            self._check_title,
            self._check_meta_description,
            self._check_h1,
            self._check_image_alt,
            self._check_content_length,
            self._check_viewport,
            self._check_language,
            self._check_canonical,
            self._check_open_graph,
            self._check_structured_data,
            self._check_internal_links,
        ]

    def analyze(self, signals: PageSignals, url: str = "") -> List[SEOIssue]:
        """Detect SEO issues on a page.

        Args:
            signals: Signals extracted from the page
            url: Page URL

        Returns:
            Issues in check order
        """
        issues = []
        for check in self.checks:
            issue = check(signals, url)
            if issue is not None:
                issues.append(issue)
        return issues

    def _check_title(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        title_length = len(signals.title)
        if not signals.title:
            return SEOIssue(
                severity=Severity.ERROR,
                category=CATEGORY_META_TAGS,
                message='Missing title tag',
                recommendation='Add a unique, descriptive title tag between 50-60 characters.',
            )
        if title_length < self.thresholds.title_min:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_META_TAGS,
                message=f'Title tag too short ({title_length} characters)',
                recommendation='Expand your title to 50-60 characters for better SEO impact.',
            )
        if title_length > self.thresholds.title_max:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_META_TAGS,
                message=f'Title tag too long ({title_length} characters)',
                recommendation=(
                    f'Shorten your title to {self.thresholds.title_max} characters or less '
                    'to avoid truncation in search results.'
                ),
            )
        return None

    def _check_meta_description(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        description_length = len(signals.meta_description)
        if not signals.meta_description:
            return SEOIssue(
                severity=Severity.ERROR,
                category=CATEGORY_META_TAGS,
                message='Missing meta description',
                recommendation='Add a compelling meta description between 150-160 characters.',
            )
        if description_length < self.thresholds.meta_description_min:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_META_TAGS,
                message=f'Meta description too short ({description_length} characters)',
                recommendation='Expand your meta description to 150-160 characters.',
            )
        if description_length > self.thresholds.meta_description_max:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_META_TAGS,
                message=f'Meta description too long ({description_length} characters)',
                recommendation='Shorten your meta description to avoid truncation in search results.',
            )
        return None

    def _check_h1(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if not signals.h1:
            return SEOIssue(
                severity=Severity.ERROR,
                category=CATEGORY_HEADINGS,
                message='Missing H1 tag',
                recommendation='Add exactly one H1 tag that describes the main topic of the page.',
            )
        if len(signals.h1) > 1:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_HEADINGS,
                message=f'Multiple H1 tags found ({len(signals.h1)})',
                recommendation='Use only one H1 tag per page for better SEO structure.',
            )
        return None

    def _check_image_alt(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        missing = len(signals.images_without_alt)
        if missing > 0:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_IMAGES,
                message=f'{missing} image(s) missing alt text',
                recommendation='Add descriptive alt text to all images for accessibility and SEO.',
            )
        return None

    def _check_content_length(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if signals.word_count < self.thresholds.thin_content_words:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_CONTENT,
                message=f'Thin content ({signals.word_count} words)',
                recommendation=(
                    'Aim for at least 300-500 words of quality content. '
                    'Consider expanding with relevant information.'
                ),
            )
        return None

    def _check_viewport(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if not signals.has_viewport:
            return SEOIssue(
                severity=Severity.ERROR,
                category=CATEGORY_TECHNICAL,
                message='Missing viewport meta tag',
                recommendation=(
                    'Add <meta name="viewport" content="width=device-width, initial-scale=1"> '
                    'for mobile responsiveness.'
                ),
            )
        return None

    def _check_language(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if not signals.language:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_TECHNICAL,
                message='Missing language attribute',
                recommendation='Add lang attribute to the HTML tag (e.g., <html lang="en">).',
            )
        return None

    def _check_canonical(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if not signals.canonical_url:
            return SEOIssue(
                severity=Severity.INFO,
                category=CATEGORY_TECHNICAL,
                message='No canonical URL specified',
                recommendation='Add a canonical URL to prevent duplicate content issues.',
            )
        return None

    def _check_open_graph(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if not (signals.og_title and signals.og_description and signals.og_image):
            return SEOIssue(
                severity=Severity.INFO,
                category=CATEGORY_SOCIAL,
                message='Incomplete Open Graph tags',
                recommendation='Add og:title, og:description, and og:image for better social media sharing.',
            )
        return None

    def _check_structured_data(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        if not signals.schema_markup:
            return SEOIssue(
                severity=Severity.INFO,
                category=CATEGORY_TECHNICAL,
                message='No structured data (Schema.org) found',
                recommendation='Add JSON-LD structured data to help search engines understand your content.',
            )
        return None

    def _check_internal_links(self, signals: PageSignals, url: str) -> Optional[SEOIssue]:
        count = len(signals.internal_links)
        if count < self.thresholds.min_internal_links:
            return SEOIssue(
                severity=Severity.WARNING,
                category=CATEGORY_LINKS,
                message=f'Few internal links ({count})',
                recommendation='Add more internal links to improve site navigation and distribute page authority.',
            )
        return None


def analyze_issues(
    signals: PageSignals,
    url: str = "",
    thresholds: Optional[AnalysisThresholds] = None,
) -> List[SEOIssue]:
    """Detect SEO issues on a page using the default rule set."""
    return IssueAnalyzer(thresholds).analyze(signals, url)
