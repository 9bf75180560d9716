"""Data models for SEO analysis."""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


def _serialize(value: Any) -> Any:
    """Convert dataclasses, enums and tuples into JSON-friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class Serializable:
    """Mixin adding ``to_dict`` to dataclass records."""

    def to_dict(self) -> dict:
        return _serialize(self)


class Severity(str, Enum):
    """Severity of a detected SEO issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# ============================================================================
# Extraction Models
# ============================================================================

@dataclass(frozen=True)
class LinkRecord(Serializable):
    """An anchor found on a page."""

    href: str
    text: str = ""
    rel: str = ""
    is_nofollow: bool = False


@dataclass(frozen=True)
class ImageRecord(Serializable):
    """An image found on a page."""

    src: str
    alt: str = ""
    width: Optional[str] = None
    height: Optional[str] = None
    loading: Optional[str] = None


@dataclass(frozen=True)
class PageSignals(Serializable):
    """SEO signals extracted from a single HTML document."""

    # Meta tags
    title: str = ""
    meta_description: str = ""
    meta_keywords: str = ""
    canonical_url: str = ""
    robots: str = ""

    # Open Graph
    og_title: str = ""
    og_description: str = ""
    og_image: str = ""
    og_type: str = ""
    og_url: str = ""

    # Twitter Cards
    twitter_card: str = ""
    twitter_title: str = ""
    twitter_description: str = ""
    twitter_image: str = ""

    # Headings, in document order
    h1: tuple[str, ...] = ()
    h2: tuple[str, ...] = ()
    h3: tuple[str, ...] = ()
    h4: tuple[str, ...] = ()
    h5: tuple[str, ...] = ()
    h6: tuple[str, ...] = ()

    # Links
    internal_links: tuple[LinkRecord, ...] = ()
    external_links: tuple[LinkRecord, ...] = ()

    # Images
    images: tuple[ImageRecord, ...] = ()
    images_without_alt: tuple[ImageRecord, ...] = ()

    # Content
    text_content: str = ""
    word_count: int = 0

    # Technical
    has_viewport: bool = False
    has_charset: bool = False
    language: str = ""
    schema_markup: tuple[Any, ...] = ()

    def headings(self, level: int) -> tuple[str, ...]:
        """Return the headings of the given level (1-6)."""
        if level not in range(1, 7):
            raise ValueError(f"Heading level must be 1-6, got {level}")
        return getattr(self, f"h{level}")

    @property
    def heading_structure(self) -> dict[str, int]:
        return {f"h{level}": len(self.headings(level)) for level in range(1, 7)}

    @property
    def nofollow_links(self) -> list[LinkRecord]:
        return [
            link for link in (*self.internal_links, *self.external_links)
            if link.is_nofollow
        ]

    @property
    def schema_types(self) -> list[str]:
        """``@type`` of each structured data block ("Unknown" when absent)."""
        types = []
        for schema in self.schema_markup:
            schema_type = schema.get('@type') if isinstance(schema, dict) else None
            types.append(schema_type or 'Unknown')
        return types


# ============================================================================
# Analysis Models
# ============================================================================

@dataclass(frozen=True)
class ReadabilityMetrics(Serializable):
    """Flesch readability metrics for a block of text."""

    flesch_reading_ease: float = 0.0  # 0-100, higher is easier
    flesch_kincaid_grade: float = 0.0  # US grade level, floored at 0
    avg_sentence_length: float = 0.0  # words per sentence
    avg_word_length: float = 0.0  # characters per word
    readability_level: str = "N/A"


@dataclass(frozen=True)
class KeywordAnalysis(Serializable):
    """Placement and density of a target keyword on a page."""

    keyword: str
    in_title: bool = False
    in_meta_description: bool = False
    in_h1: bool = False
    in_h2: bool = False
    in_url: bool = False
    density: float = 0.0  # percentage of content words
    count: int = 0
    prominence_score: int = 0  # 0-100


@dataclass(frozen=True)
class SEOIssue(Serializable):
    """A single detected SEO problem with a recommendation."""

    severity: Severity
    category: str
    message: str
    recommendation: str


@dataclass(frozen=True)
class SEOScore(Serializable):
    """Composite SEO score with per-category sub-scores."""

    overall: int
    content: int
    technical: int
    on_page: int
    links: int

    @property
    def categories(self) -> dict[str, int]:
        return {
            'content': self.content,
            'technical': self.technical,
            'on_page': self.on_page,
            'links': self.links,
        }


@dataclass(frozen=True)
class ScoredKeyword(Serializable):
    """A keyword with a normalized relevance score in [0, 1]."""

    keyword: str
    score: float


@dataclass(frozen=True)
class MissingKeyword(Serializable):
    """A keyword one side lacks, with an opportunity tier."""

    keyword: str
    score: float
    opportunity: str  # High / Medium / Low


@dataclass(frozen=True)
class CommonKeyword(Serializable):
    """A keyword both sides share, with each side's score."""

    keyword: str
    score_a: float
    score_b: float


# ============================================================================
# Collaborator Models
# ============================================================================

@dataclass(frozen=True)
class FetchedPage(Serializable):
    """Result of fetching a single URL."""

    url: str  # final URL after redirects
    html: str = ""
    status_code: int = 0
    headers: dict[str, str] = field(default_factory=dict)
    load_time_ms: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and 0 < self.status_code < 400


@dataclass(frozen=True)
class SerpResult(Serializable):
    """One organic search result."""

    position: int
    url: str
    domain: str
    title: str = ""
    description: str = ""


@dataclass(frozen=True)
class RankCheckResult(Serializable):
    """Where a domain ranks for a keyword (position None when unknown)."""

    keyword: str
    target_domain: str
    position: Optional[int]
    url: Optional[str]
    location: str
    top_results: tuple[SerpResult, ...] = ()
    checked_at: datetime = field(default_factory=datetime.now)
    country: str = ""
    city: Optional[str] = None


@dataclass(frozen=True)
class RankHistoryEntry(Serializable):
    """A stored rank check."""

    id: int
    keyword: str
    domain: str
    position: Optional[int]
    url: Optional[str]
    location: str
    city: str
    country: str
    device: str
    tracked_at: str


@dataclass(frozen=True)
class CompetitorPair(Serializable):
    """A competitor being tracked against one of your domains."""

    id: int
    your_domain: str
    competitor_domain: str
    added_at: str


@dataclass(frozen=True)
class TrendData(Serializable):
    """Estimated relative interest in a keyword."""

    keyword: str
    interest: int  # 0-100 relative interest
    trend: str  # rising / stable / declining
    related_queries: tuple[str, ...] = ()


@dataclass(frozen=True)
class KeywordResearchResult(Serializable):
    """Heuristic keyword research for a seed keyword."""

    keyword: str
    suggestions: tuple[str, ...]
    long_tail_keywords: tuple[str, ...]
    related_terms: tuple[str, ...]
    questions: tuple[str, ...]
    difficulty: int
    volume: int
    opportunity: str
    estimated_cpc: str
    competition: str
    trend: str


# ============================================================================
# Report Models
# ============================================================================

@dataclass(frozen=True)
class AuditReport(Serializable):
    """Full single-page SEO audit."""

    url: str
    signals: PageSignals
    issues: tuple[SEOIssue, ...]
    score: SEOScore
    readability: ReadabilityMetrics
    top_keywords: tuple[ScoredKeyword, ...]
    ssl_enabled: bool
    load_time_ms: int
    status_code: int
    page_speed: int

    def summary(self) -> dict:
        """Flat audit summary mirroring the persisted record."""
        signals = self.signals
        return {
            'url': self.url,
            'title': signals.title,
            'title_length': len(signals.title),
            'meta_description': signals.meta_description,
            'meta_description_length': len(signals.meta_description),
            'canonical_url': signals.canonical_url,
            'robots': signals.robots,
            'h1_count': len(signals.h1),
            'h1_tags': list(signals.h1),
            'h2_count': len(signals.h2),
            'heading_structure': signals.heading_structure,
            'total_images': len(signals.images),
            'images_without_alt': len(signals.images_without_alt),
            'internal_links': len(signals.internal_links),
            'external_links': len(signals.external_links),
            'nofollow_links': len(signals.nofollow_links),
            'word_count': signals.word_count,
            'ssl_enabled': self.ssl_enabled,
            'has_viewport': signals.has_viewport,
            'has_charset': signals.has_charset,
            'language': signals.language,
            'load_time_ms': self.load_time_ms,
            'status_code': self.status_code,
            'page_speed': self.page_speed,
            'og_tags': {
                'title': signals.og_title,
                'description': signals.og_description,
                'image': signals.og_image,
                'type': signals.og_type,
                'url': signals.og_url,
            },
            'twitter_tags': {
                'card': signals.twitter_card,
                'title': signals.twitter_title,
                'description': signals.twitter_description,
                'image': signals.twitter_image,
            },
            'has_schema_markup': bool(signals.schema_markup),
            'schema_types': signals.schema_types,
            'readability': self.readability.to_dict(),
            'top_keywords': [kw.to_dict() for kw in self.top_keywords],
            'score': self.score.to_dict(),
            'issues': [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class OnPageReport(Serializable):
    """Keyword-focused on-page optimization check."""

    url: str
    keyword: str
    analysis: KeywordAnalysis
    readability: ReadabilityMetrics
    word_count: int
    suggestions: tuple[str, ...]
    related_keywords: tuple[ScoredKeyword, ...]
    seo_score: int


@dataclass(frozen=True)
class KeywordGapReport(Serializable):
    """Keyword gap between your domain and a competitor's."""

    your_domain: str
    competitor_domain: str
    your_keywords: tuple[ScoredKeyword, ...]
    competitor_keywords: tuple[ScoredKeyword, ...]
    missing: tuple[MissingKeyword, ...]
    common: tuple[CommonKeyword, ...]
    your_unique: tuple[MissingKeyword, ...]
    summary: dict = field(default_factory=dict)
